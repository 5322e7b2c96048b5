"""
tensor_math.py

Principal axis frames of symmetric 3x3 tensors and the Euler angles that
rotate one frame onto another.

Conventions used throughout:
  - Rotations are active and act on column vectors: v' = R @ v.
  - 'zyz' means R = Rz(alpha) @ Ry(beta) @ Rz(gamma); 'zxz' uses Rx for beta.
  - beta lies in [0, pi]; alpha and gamma lie in (-pi, pi].
  - At gimbal lock (beta = 0 or pi) gamma is set to 0 and the whole rotation
    about z is carried by alpha.
"""

import numpy as np

from config import EULER_CONVENTIONS, TENSOR_TOLERANCES
from errors import InvalidTensorError, UnsupportedConventionError

# Voigt order of the six independent components of a symmetric tensor
_VOIGT_INDICES = ((0, 0), (1, 1), (2, 2), (1, 2), (0, 2), (0, 1))

# Sign flips that turn a principal frame into an equivalent proper frame.
# The order is the tie-break order used by relative_rotation.
_FRAME_FLIPS = (
    np.diag([1.0, 1.0, 1.0]),
    np.diag([-1.0, -1.0, 1.0]),
    np.diag([1.0, -1.0, -1.0]),
    np.diag([-1.0, 1.0, -1.0]),
)

_TRACE_TIE_TOLERANCE = 1e-8


def as_tensor(values):
    """
    Convert tensor input into a 3x3 float array without checking symmetry.

    Parameters:
    -----------
    values : array_like
        A 3x3 matrix, 9 values in row-major order (as found in .magres files)
        or the 6 independent components in Voigt order (xx, yy, zz, yz, xz, xy).

    Returns:
    --------
    numpy.ndarray
        A new (3, 3) float array.
    """
    try:
        arr = np.array(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidTensorError(f"Tensor values must be numeric: {e}") from e

    if arr.shape == (3, 3):
        tensor = arr
    elif arr.shape == (9,):
        tensor = arr.reshape(3, 3)
    elif arr.shape == (6,):
        tensor = np.zeros((3, 3))
        for value, (i, j) in zip(arr, _VOIGT_INDICES):
            tensor[i, j] = value
            tensor[j, i] = value
    else:
        raise InvalidTensorError(
            f"Tensor must be 3x3, 9 or 6 values; got shape {arr.shape}"
        )

    if not np.all(np.isfinite(tensor)):
        raise InvalidTensorError("Tensor contains non-finite values")
    return tensor


def symmetric_part(values):
    """Return (T + T^T) / 2. Magnetic shielding tensors need this before diagonalization."""
    tensor = as_tensor(values)
    return 0.5 * (tensor + tensor.T)


def validate_tensor(values):
    """
    Return the input as a symmetric 3x3 float array.

    Raises InvalidTensorError if the input is not numeric, not 3x3 (or one of
    the flat forms accepted by as_tensor), not finite, or not symmetric.
    """
    tensor = as_tensor(values)
    scale = max(1.0, float(np.max(np.abs(tensor))))
    asymmetry = float(np.max(np.abs(tensor - tensor.T)))
    if asymmetry > TENSOR_TOLERANCES["symmetry"] * scale:
        raise InvalidTensorError(
            f"Tensor is not symmetric (max |T - T^T| = {asymmetry:.3g})"
        )
    # Drop numerical noise so eigh sees an exactly symmetric matrix
    return 0.5 * (tensor + tensor.T)


def check_convention(convention):
    """Return the convention tag in lower case or raise UnsupportedConventionError."""
    if not isinstance(convention, str) or convention.lower() not in EULER_CONVENTIONS:
        raise UnsupportedConventionError(
            f"Invalid Euler angles convention: {convention!r} "
            f"(use one of {', '.join(EULER_CONVENTIONS)})"
        )
    return convention.lower()


def _canonical_basis(vectors):
    # Gram-Schmidt of the lab axes projected onto span(vectors)
    projector = vectors @ vectors.T
    basis = []
    for axis in np.eye(3):
        w = projector @ axis
        for b in basis:
            w = w - np.dot(w, b) * b
        norm = np.linalg.norm(w)
        if norm > 1e-3:
            basis.append(w / norm)
        if len(basis) == vectors.shape[1]:
            break
    return np.column_stack(basis)


def principal_frame(tensor):
    """
    Diagonalize a symmetric tensor and return its principal axis frame.

    Eigenvalues are sorted in ascending order and the frame holds the matching
    eigenvectors as columns. The frame is made deterministic as follows:
      - eigenvectors of a degenerate eigenvalue group are replaced by the lab
        axes x, y, z (in that order) projected onto the degenerate subspace and
        orthonormalized, so an isotropic tensor has the identity frame;
      - each eigenvector is flipped so that its largest-magnitude component is
        positive (the first one on ties);
      - the third axis is replaced by the cross product of the first two, so
        the frame is always a proper rotation (det = +1).

    Parameters:
    -----------
    tensor : array_like
        Symmetric tensor, in any form accepted by validate_tensor.

    Returns:
    --------
    (numpy.ndarray, numpy.ndarray)
        Eigenvalues, shape (3,), and frame, shape (3, 3).
    """
    t = validate_tensor(tensor)
    evals, evecs = np.linalg.eigh(t)

    tol = TENSOR_TOLERANCES["degeneracy"] * max(1.0, float(np.max(np.abs(evals))))
    frame = evecs.copy()
    start = 0
    for i in range(1, 4):
        if i == 3 or evals[i] - evals[i - 1] > tol:
            if i - start > 1:
                frame[:, start:i] = _canonical_basis(evecs[:, start:i])
            start = i

    for k in range(3):
        v = frame[:, k]
        if v[np.argmax(np.abs(v))] < 0:
            frame[:, k] = -v
    frame[:, 2] = np.cross(frame[:, 0], frame[:, 1])

    return evals, frame


def relative_rotation(frame_a, frame_b):
    """
    Rotation R with R @ frame_a equal to frame_b up to the sign symmetry of a
    principal frame.

    A symmetric tensor does not distinguish an axis from its opposite, so
    frame_b @ S describes the same tensor for every S in _FRAME_FLIPS. The
    candidate with the largest trace (smallest rotation angle) is returned;
    candidates within _TRACE_TIE_TOLERANCE of the best go to the earliest S.
    Swapping the frames returns the transpose.
    """
    frame_a = np.asarray(frame_a, dtype=float)
    frame_b = np.asarray(frame_b, dtype=float)
    candidates = [frame_b @ flip @ frame_a.T for flip in _FRAME_FLIPS]
    traces = [np.trace(r) for r in candidates]
    best = max(traces)
    for r, t in zip(candidates, traces):
        if t >= best - _TRACE_TIE_TOLERANCE:
            return r


def _rot_x(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[1, 0, 0],
                     [0, c, -s],
                     [0, s, c]], dtype=float)


def _rot_y(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0, s],
                     [0, 1, 0],
                     [-s, 0, c]], dtype=float)


def _rot_z(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, -s, 0],
                     [s, c, 0],
                     [0, 0, 1]], dtype=float)


def euler_rotation_matrix(alpha, beta, gamma, convention="zyz"):
    """
    Build the active rotation matrix for Euler angles (radians).

    'zyz': Rz(alpha) @ Ry(beta) @ Rz(gamma)
    'zxz': Rz(alpha) @ Rx(beta) @ Rz(gamma)
    """
    conv = check_convention(convention)
    second = _rot_y if conv == "zyz" else _rot_x
    return _rot_z(alpha) @ second(beta) @ _rot_z(gamma)


def euler_from_matrix(rotation, convention="zyz"):
    """
    Decompose a proper rotation matrix into Euler angles (radians).

    Parameters:
    -----------
    rotation : array_like
        (3, 3) rotation matrix.
    convention : str
        'zyz' or 'zxz'.

    Returns:
    --------
    tuple
        (alpha, beta, gamma) as floats.
    """
    conv = check_convention(convention)
    r = np.asarray(rotation, dtype=float)
    if r.shape != (3, 3):
        raise ValueError(f"Rotation matrix must be 3x3; got shape {r.shape}")

    # hypot keeps sin(beta) accurate near the poles, where arccos is not
    sin_beta = np.hypot(r[0, 2], r[1, 2])
    beta = np.arctan2(sin_beta, r[2, 2])

    if sin_beta > TENSOR_TOLERANCES["gimbal"]:
        if conv == "zyz":
            alpha = np.arctan2(r[1, 2], r[0, 2])
            gamma = np.arctan2(r[2, 1], -r[2, 0])
        else:
            alpha = np.arctan2(r[0, 2], -r[1, 2])
            gamma = np.arctan2(r[2, 0], r[2, 1])
    else:
        gamma = 0.0
        if r[2, 2] > 0:
            beta = 0.0
            alpha = np.arctan2(r[1, 0], r[0, 0])
        else:
            beta = np.pi
            if conv == "zyz":
                alpha = np.arctan2(-r[0, 1], r[1, 1])
            else:
                alpha = np.arctan2(r[1, 0], r[0, 0])

    # Adding 0.0 turns -0.0 into 0.0 so reports never print "-0.00000" for zero
    return float(alpha) + 0.0, float(beta) + 0.0, float(gamma) + 0.0


def euler_between_tensors(tensor_a, tensor_b, convention="zyz"):
    """
    Euler angles of the rotation taking the principal frame of tensor_a onto
    the principal frame of tensor_b.

    Parameters:
    -----------
    tensor_a, tensor_b : array_like
        Symmetric 3x3 tensors (see validate_tensor for accepted forms).
    convention : str
        'zyz' or 'zxz' (case insensitive).

    Returns:
    --------
    tuple
        (alpha, beta, gamma) in radians.

    Raises:
    -------
    UnsupportedConventionError, InvalidTensorError
    """
    conv = check_convention(convention)
    _, frame_a = principal_frame(tensor_a)
    _, frame_b = principal_frame(tensor_b)
    rotation = relative_rotation(frame_a, frame_b)
    return euler_from_matrix(rotation, conv)
