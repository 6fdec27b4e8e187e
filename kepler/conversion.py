import numpy as np

from kepler.errors import DegenerateOrbitError
from kepler.kepler import DEFAULT_CONFIG
from kepler.keplerelement import KeplerElements, OrbitType, classify_orbit
from kepler.state import CartesianState

X_HAT = np.array([1.0, 0.0, 0.0])
Z_HAT = np.array([0.0, 0.0, 1.0])


def perifocal_to_eci_matrix(raan, i, w):
    """R = Rz(raan) Rx(i) Rz(w), perifocal -> inertial"""
    # crassidis page 379-380
    return np.array([
        [np.cos(raan)*np.cos(w) - np.sin(raan)*np.sin(w)*np.cos(i),
         -np.cos(raan)*np.sin(w) - np.sin(raan)*np.cos(w)*np.cos(i),
         np.sin(raan)*np.sin(i)],

        [np.sin(raan)*np.cos(w) + np.cos(raan)*np.sin(w)*np.cos(i),
         -np.sin(raan)*np.sin(w) + np.cos(raan)*np.cos(w)*np.cos(i),
         -np.cos(raan)*np.sin(i)],

        [np.sin(w)*np.sin(i),
         np.cos(w)*np.sin(i),
         np.cos(i)]
    ])


def _signed_angle(a_hat, b_hat, x):
    """angle of x in the plane spanned by a_hat, b_hat (= h_hat x a_hat)"""
    return float(np.arctan2(np.dot(x, b_hat), np.dot(x, a_hat)))


def cartesian_to_kepler(state, mu, cfg=DEFAULT_CONFIG):
    """
    Classical elements from a cartesian state.

    Angles come from atan2 so every quadrant is handled the same way.
    Undefined angles follow the usual conventions: equatorial orbits get
    raan = 0 and the node line is the x axis, circular orbits get w = 0 and
    nu is then the argument of latitude (or true longitude).

    Raises DegenerateOrbitError for rectilinear motion (|h| ~ 0).
    """
    r = state.r
    v = state.v
    r_norm = np.linalg.norm(r)
    v_norm = np.linalg.norm(v)

    h = np.cross(r, v)
    h_norm = np.linalg.norm(h)

    if r_norm == 0.0 or h_norm <= cfg.angular_momentum_floor * r_norm * v_norm:
        raise DegenerateOrbitError(
            f"Angular momentum {h_norm:.3e} m^2/s is below the floor for "
            f"|r|={r_norm:.3e} m, |v|={v_norm:.3e} m/s (rectilinear trajectory)."
        )

    h_hat = h / h_norm

    e_vec = np.cross(v, h) / mu - r / r_norm
    e = float(np.linalg.norm(e_vec))
    p = float(h_norm**2 / mu)

    orbit_type = classify_orbit(e, cfg.orbit_type_tol)

    n_vec = np.cross(Z_HAT, h)
    n_norm = np.linalg.norm(n_vec)

    if n_norm <= cfg.equatorial_tol * h_norm:
        # equatorial, node line taken along x
        i = 0.0 if h[2] > 0.0 else np.pi
        raan = 0.0
        n_hat = X_HAT
    else:
        i = float(np.arctan2(np.hypot(h[0], h[1]), h[2]))
        raan = float(np.arctan2(n_vec[1], n_vec[0]))
        n_hat = n_vec / n_norm

    if orbit_type is OrbitType.CIRCULAR:
        w = 0.0
        e_hat = n_hat
    else:
        e_hat = e_vec / e
        w = _signed_angle(n_hat, np.cross(h_hat, n_hat), e_hat)

    nu = _signed_angle(e_hat, np.cross(h_hat, e_hat), r)

    if orbit_type is OrbitType.PARABOLIC:
        a = None
    else:
        a = p / (1.0 - e * e)

    return KeplerElements(a=a, e=e, i=i, raan=raan, w=w, nu=nu, p=p)


def kepler_to_cartesian(el, mu):
    """perifocal position/velocity rotated into the inertial frame"""
    e = el.e
    p = el.p
    cos_nu = np.cos(el.nu)
    sin_nu = np.sin(el.nu)

    r = p / (1.0 + e * cos_nu)

    # position and velocity in perifocal frame
    r_pf = r * np.array([cos_nu, sin_nu, 0.0])
    v_pf = np.sqrt(mu / p) * np.array([-sin_nu, e + cos_nu, 0.0])

    R = perifocal_to_eci_matrix(el.raan, el.i, el.w)

    return CartesianState(r=R @ r_pf, v=R @ v_pf)
