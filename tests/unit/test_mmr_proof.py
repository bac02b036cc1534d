"""
Module 03 - MMR Proof Unit Tests
Tests for core/mmr/proof.py

Tests:
- Ten-leaf scenario with tamper detection
- Every leaf of many sizes verifies, under every hasher
- Exact proof layout for small shapes
- Expected proof lengths
- Generation failures (InvalidTargetException)
- Structural failures (MalformedProofException)
"""

import pytest

from core.crypto.hashing import get_hasher
from core.mmr.mmr import MMR
from core.mmr.positions import get_peaks
from core.mmr.proof import (
    MerkleMountainProof,
    bag_peaks,
    calculate_root,
    expected_proof_length,
    verify,
    verify_digest,
)
from core.schemas.errors import (
    EmptyStructureException,
    InvalidTargetException,
    MalformedProofException,
)
from fixtures.common import flip_bit, make_mmr, make_payload


class TestTenLeafScenario:
    """Payload i = bytes(b ^ i for b in range(32)); prove the last leaf."""

    def test_last_leaf_verifies(self, ten_leaf_mmr):
        mmr, positions, payloads = ten_leaf_mmr
        root = mmr.root()
        proof = mmr.gen_proof([positions[-1]])

        assert positions[-1] == 16
        assert proof.mmr_size == 18
        assert len(proof) == 2
        assert verify(root, proof, 16, payloads[-1], mmr.hasher)

    def test_flipped_payload_bit_fails(self, ten_leaf_mmr):
        mmr, positions, payloads = ten_leaf_mmr
        proof = mmr.gen_proof([16])

        assert not verify(mmr.root(), proof, 16, flip_bit(payloads[-1]), mmr.hasher)

    def test_flipped_root_bit_fails(self, ten_leaf_mmr):
        mmr, _, payloads = ten_leaf_mmr
        proof = mmr.gen_proof([16])

        assert not verify(flip_bit(mmr.root(), 31, 7), proof, 16, payloads[-1], mmr.hasher)

    def test_flipped_proof_item_fails(self, ten_leaf_mmr):
        mmr, _, payloads = ten_leaf_mmr
        proof = mmr.gen_proof([16])
        for index in range(len(proof)):
            items = list(proof.items)
            items[index] = flip_bit(items[index])
            tampered = MerkleMountainProof(mmr_size=proof.mmr_size, items=tuple(items))

            assert not verify(mmr.root(), tampered, 16, payloads[-1], mmr.hasher)

    def test_wrong_position_fails(self, ten_leaf_mmr):
        mmr, _, payloads = ten_leaf_mmr
        proof = mmr.gen_proof([16])

        # 15 has the same proof shape at this size
        assert not verify(mmr.root(), proof, 15, payloads[-1], mmr.hasher)

    def test_proof_for_position_equal_to_size(self, ten_leaf_mmr):
        mmr, _, _ = ten_leaf_mmr

        with pytest.raises(InvalidTargetException):
            mmr.gen_proof([mmr.mmr_size])

    def test_empty_root(self):
        from core.schemas.errors import EmptyStructureException

        with pytest.raises(EmptyStructureException):
            MMR().root()


class TestSoundness:
    """Every honestly generated proof verifies."""

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 7, 8, 11, 16, 17, 33])
    def test_every_leaf_verifies(self, any_hasher, count):
        mmr, positions, payloads = make_mmr(count, any_hasher)
        root = mmr.root()
        for pos, payload in zip(positions, payloads):
            proof = mmr.gen_proof([pos])

            assert len(proof) == expected_proof_length(pos, mmr.mmr_size)
            assert verify(root, proof, pos, payload, any_hasher)
            assert proof.calculate_root(pos, any_hasher.leaf_hash(payload), any_hasher) == root

    def test_old_proof_pinned_to_old_size(self):
        mmr, positions, payloads = make_mmr(6)
        old_root = mmr.root()
        proof = mmr.gen_proof([positions[2]])

        mmr.push_payload(make_payload(6))
        mmr.push_payload(make_payload(7))

        assert verify(old_root, proof, positions[2], payloads[2], mmr.hasher)
        assert not verify(mmr.root(), proof, positions[2], payloads[2], mmr.hasher)

    def test_wrong_hasher_fails(self):
        mmr, positions, payloads = make_mmr(5, get_hasher("blake2b"))
        proof = mmr.gen_proof([positions[1]])

        assert not verify(mmr.root(), proof, positions[1], payloads[1], get_hasher("sha256"))

    def test_single_leaf_proof_is_empty(self, blake2b):
        mmr, _, payloads = make_mmr(1, blake2b)
        proof = mmr.gen_proof([0])

        assert proof.items == ()
        assert verify(mmr.root(), proof, 0, payloads[0], blake2b)

    def test_verify_digest(self, blake2b):
        mmr = MMR(blake2b)
        digests = [bytes([i]) * 32 for i in range(6)]
        positions = mmr.extend(digests)
        proof = mmr.gen_proof([positions[4]])

        assert verify_digest(mmr.root(), proof, positions[4], digests[4], blake2b)
        assert not verify(mmr.root(), proof, positions[4], digests[4], blake2b)

    def test_method_forms(self, blake2b):
        mmr, positions, payloads = make_mmr(3, blake2b)
        proof = mmr.gen_proof([positions[0]])

        assert proof.verify(mmr.root(), positions[0], payloads[0], blake2b)
        assert proof.proof_items() == list(proof.items)


class TestProofLayout:
    """Proof items: path siblings, left peaks, bagged right peaks."""

    def test_eleven_nodes_first_leaf(self, blake2b):
        mmr, _, _ = make_mmr(7, blake2b)
        proof = mmr.gen_proof([0])

        bagged_rhs = blake2b.merge(mmr.get(10), mmr.get(9))
        assert list(proof.items) == [mmr.get(1), mmr.get(5), bagged_rhs]

    def test_single_right_peak_not_bagged(self, blake2b):
        mmr, _, _ = make_mmr(3, blake2b)
        proof = mmr.gen_proof([0])

        assert list(proof.items) == [mmr.get(1), mmr.get(3)]

    def test_target_is_its_own_peak(self, blake2b):
        mmr, _, _ = make_mmr(3, blake2b)
        proof = mmr.gen_proof([3])

        assert list(proof.items) == [mmr.get(2)]

    def test_right_child_path(self, blake2b):
        mmr, _, _ = make_mmr(7, blake2b)
        proof = mmr.gen_proof([8])

        # sibling 7, then left peak 6, then the single right peak 10
        assert list(proof.items) == [mmr.get(7), mmr.get(6), mmr.get(10)]

    def test_path_precedes_left_peaks(self, blake2b):
        """The whole climb comes first, even when a taller peak sits to the left."""
        mmr, _, _ = make_mmr(6, blake2b)
        proof = mmr.gen_proof([7])

        assert mmr.mmr_size == 10
        assert list(proof.items) == [mmr.get(8), mmr.get(6)]

    @pytest.mark.parametrize(
        "pos,size,expected",
        [
            (0, 1, 0),
            (16, 18, 2),
            (0, 18, 4),
            (0, 19, 4),
            (18, 19, 2),
            (7, 11, 3),
            (10, 11, 2),
        ],
    )
    def test_expected_length(self, pos, size, expected):
        assert expected_proof_length(pos, size) == expected

    def test_expected_length_beyond_size(self):
        with pytest.raises(MalformedProofException):
            expected_proof_length(4, 4)


class TestBagPeaks:
    """Tests for bag_peaks()."""

    def test_empty(self, blake2b):
        with pytest.raises(EmptyStructureException):
            bag_peaks([], blake2b)

    def test_single(self, blake2b):
        peak = blake2b.leaf_hash(b"a")
        assert bag_peaks([peak], blake2b) == peak

    def test_right_to_left(self, blake2b):
        a, b, c = (blake2b.leaf_hash(x) for x in (b"a", b"b", b"c"))
        assert bag_peaks([a, b, c], blake2b) == blake2b.merge(blake2b.merge(c, b), a)

    def test_matches_root(self, blake2b):
        mmr, _, _ = make_mmr(11, blake2b)
        peaks = [mmr.get(p) for p in get_peaks(mmr.mmr_size)]

        assert bag_peaks(peaks, blake2b) == mmr.root()


class TestMultiTarget:
    """Generation over a set of positions."""

    def test_siblings_derive_each_other(self):
        mmr, _, _ = make_mmr(2)
        assert mmr.gen_proof([0, 1]).items == ()

    def test_targets_in_two_mountains(self):
        mmr, _, _ = make_mmr(3)
        assert list(mmr.gen_proof([0, 3]).items) == [mmr.get(1)]

    def test_paths_merge_above_leaves(self):
        """Targets 0 and 4 share the node at 6; its sibling 5 is derived."""
        mmr, _, _ = make_mmr(8)
        proof = mmr.gen_proof([0, 4])

        assert proof.mmr_size == 15
        assert list(proof.items) == [mmr.get(1), mmr.get(3), mmr.get(13)]

    def test_paths_merge_with_right_peak(self):
        mmr, _, _ = make_mmr(9)
        proof = mmr.gen_proof([7, 11, 15])

        assert list(proof.items) == [mmr.get(8), mmr.get(10), mmr.get(6)]

    def test_duplicates_collapse(self):
        mmr, _, _ = make_mmr(10)
        assert mmr.gen_proof([16, 16]) == mmr.gen_proof([16])

    def test_order_does_not_matter(self):
        mmr, _, _ = make_mmr(10)
        assert mmr.gen_proof([7, 0]) == mmr.gen_proof([0, 7])


class TestGenerationErrors:
    """gen_proof() rejects targets it cannot prove."""

    def test_no_targets(self):
        mmr, _, _ = make_mmr(3)
        with pytest.raises(InvalidTargetException):
            mmr.gen_proof([])

    def test_internal_node(self):
        mmr, _, _ = make_mmr(3)
        with pytest.raises(InvalidTargetException) as exc_info:
            mmr.gen_proof([2])
        assert "node proofs not supported" in exc_info.value.message.lower()

    def test_out_of_range(self):
        mmr, _, _ = make_mmr(3)
        with pytest.raises(InvalidTargetException):
            mmr.gen_proof([100])
        with pytest.raises(InvalidTargetException):
            mmr.gen_proof([-1])

    def test_empty_mmr(self):
        with pytest.raises(InvalidTargetException):
            MMR().gen_proof([0])


class TestMalformedProofs:
    """Structurally impossible proofs raise instead of returning False."""

    @pytest.fixture
    def honest(self, ten_leaf_mmr):
        mmr, _, payloads = ten_leaf_mmr
        return mmr, mmr.gen_proof([16]), payloads[-1]

    def test_extra_item(self, honest):
        mmr, proof, payload = honest
        longer = MerkleMountainProof(proof.mmr_size, proof.items + (bytes(32),))

        with pytest.raises(MalformedProofException) as exc_info:
            verify(mmr.root(), longer, 16, payload, mmr.hasher)
        assert exc_info.value.details["expected"] == 2

    def test_missing_item(self, honest):
        mmr, proof, payload = honest
        shorter = MerkleMountainProof(proof.mmr_size, proof.items[:-1])

        with pytest.raises(MalformedProofException):
            verify(mmr.root(), shorter, 16, payload, mmr.hasher)

    def test_item_wrong_width(self, honest):
        mmr, proof, payload = honest
        narrow = MerkleMountainProof(proof.mmr_size, (proof.items[0][:16],) + proof.items[1:])

        with pytest.raises(MalformedProofException):
            verify(mmr.root(), narrow, 16, payload, mmr.hasher)

    @pytest.mark.parametrize("size", [0, 2, 5, 17])
    def test_impossible_size(self, honest, size):
        mmr, proof, payload = honest
        with pytest.raises(MalformedProofException):
            verify(mmr.root(), MerkleMountainProof(size, proof.items), 0, payload, mmr.hasher)

    def test_position_out_of_range(self, honest):
        mmr, proof, payload = honest
        with pytest.raises(MalformedProofException):
            verify(mmr.root(), proof, 18, payload, mmr.hasher)

    def test_position_not_a_leaf(self, honest):
        mmr, proof, payload = honest
        with pytest.raises(MalformedProofException):
            verify(mmr.root(), proof, 17, payload, mmr.hasher)

    def test_leaf_digest_wrong_width(self, honest):
        mmr, proof, _ = honest
        with pytest.raises(MalformedProofException):
            calculate_root(proof, 16, b"short", mmr.hasher)

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            MerkleMountainProof(mmr_size=-1)
