"""
Tolerance tiers for numerical validation.

Defines how closely a computed decomposition must reproduce its defining
identities:
- Reconstruction: U diag(s) V^T against A, relative to ||A||
- Orthogonality: U^T U and V^T V against the identity
- Reference: agreement with LAPACK (scipy gesvd)

Used by the test suite and by SVDSolution.check().
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# A = U S V^T to a small multiple of eps * ||A||
RECONSTRUCTION = ToleranceTier(
    rtol=1e-12,
    atol=1e-12,
    name='reconstruction',
    description='U diag(s) V^T reproduces A to ~1e4 eps relative to ||A||',
)

# Columns of U and V orthonormal
ORTHOGONALITY = ToleranceTier(
    rtol=0.0,
    atol=1e-12,
    name='orthogonality',
    description='U^T U and V^T V equal the identity elementwise',
)

# Singular values against the LAPACK reference
REFERENCE = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='reference',
    description='Singular values agree with scipy gesvd',
)

# Ill-conditioned inputs (cond > 1e8), solution vectors only
ILL_CONDITIONED = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='ill_conditioned',
    description='Solutions of ill-conditioned systems',
)


def select_tolerance(is_ill_conditioned: bool = False) -> ToleranceTier:
    """Select the tolerance tier for comparing solution vectors."""
    if is_ill_conditioned:
        return ILL_CONDITIONED
    return REFERENCE
