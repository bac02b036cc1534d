"""
Module 06 - MMR Routes

Build roots, generate inclusion proofs and verify them over HTTP.

Every handler builds a fresh engine from the request body; nothing is
kept between requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.deps import resolve_hasher
from api.models.requests import GenerateRequest, ProofRequest, RootRequest, VerifyRequest
from core.crypto.hashing import Hasher, decode_digests, decode_proof_items, from_hex, to_hex
from core.mmr.commitments import build_mmr, generate_root, prove_leaves, root_record, verify_record
from core.schemas.records import ProofRecord, RootRecord, VerificationRecord


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mmr", tags=["mmr"])


def _decode_hex(values: list[str]) -> list[bytes]:
    return [from_hex(value) for value in values]


def _decode_leaves(request: RootRequest, hasher: Hasher) -> list[bytes]:
    if request.leaf_kind == "digest":
        return decode_digests(request.leaves, hasher)
    return _decode_hex(request.leaves)


@router.post("/root", response_model=RootRecord)
async def compute_root(request: RootRequest) -> RootRecord:
    """
    Compute the bagged root of an MMR built from the given leaves.

    An empty leaf list has no root and is rejected with EMPTY_STRUCTURE.
    """
    hasher = resolve_hasher(request.hasher)
    mmr = build_mmr(
        _decode_leaves(request, hasher),
        hasher,
        hash_leaves=request.leaf_kind == "payload",
    )
    record = root_record(mmr)
    logger.info(f"Computed root for {record.leaf_count} leaves ({hasher.name})")
    return record


@router.post("/proof", response_model=ProofRecord)
async def compute_proof(request: ProofRequest) -> ProofRecord:
    """Generate an inclusion proof for the leaf at request.leaf_position."""
    hasher = resolve_hasher(request.hasher)
    return prove_leaves(
        _decode_leaves(request, hasher),
        request.leaf_position,
        hasher,
        hash_leaves=request.leaf_kind == "payload",
    )


@router.post("/generate", response_model=ProofRecord)
async def generate(request: GenerateRequest) -> ProofRecord:
    """
    Push items_len sample leaves and prove the one written at target_pos.

    The returned mmr_size is the size right after the target leaf was
    pushed.
    """
    hasher = resolve_hasher(request.hasher)
    return generate_root(request.items_len, request.target_pos, hasher)


@router.post("/verify", response_model=VerificationRecord)
async def verify_proof(request: VerifyRequest) -> VerificationRecord:
    """
    Verify a single-leaf inclusion proof.

    A proof that simply does not reproduce the root answers 200 with
    valid=false; a structurally impossible proof answers MALFORMED_PROOF.
    """
    hasher = resolve_hasher(request.hasher)
    if isinstance(request.proof, str):
        items = decode_proof_items(request.proof)
    else:
        items = _decode_hex(request.proof)

    # decode up front so encoding errors are reported as such
    record = ProofRecord.model_construct(
        hasher=hasher.name,
        mmr_size=request.mmr_size,
        leaf_position=request.leaf_position,
        leaf_index=None,
        leaf=to_hex(from_hex(request.leaf)),
        leaf_kind=request.leaf_kind,
        root=to_hex(from_hex(request.root)),
        proof=[to_hex(item) for item in items],
    )
    result = verify_record(record)
    logger.info(
        f"Verified proof for position {request.leaf_position} "
        f"at size {request.mmr_size}: {result.valid}"
    )
    return result
