"""
Derivative functions for a few classic example problems, all in the f(u, p, t) or
f(du, u, p, t) form and written so that numba can compile them.
"""
import numpy as np

__all__ = ["exponential_growth",
           "lorenz",
           "lorenz_inplace",
           "van_der_pol",
           "diffusion_chain",
           "LORENZ_PARAMS"]

# sigma, rho, beta
LORENZ_PARAMS = (10.0, 28.0, 8.0 / 3.0)


def exponential_growth(u, p, t):
    return p * u


def lorenz(u, p, t):
    sigma, rho, beta = p[0], p[1], p[2]
    du = np.empty(3)
    du[0] = sigma * (u[1] - u[0])
    du[1] = u[0] * (rho - u[2]) - u[1]
    du[2] = u[0] * u[1] - beta * u[2]
    return du


def lorenz_inplace(du, u, p, t):
    sigma, rho, beta = p[0], p[1], p[2]
    du[0] = sigma * (u[1] - u[0])
    du[1] = u[0] * (rho - u[2]) - u[1]
    du[2] = u[0] * u[1] - beta * u[2]


def van_der_pol(u, p, t):
    mu = p
    du = np.empty(2)
    du[0] = u[1]
    du[1] = mu * (1.0 - u[0] ** 2) * u[1] - u[0]
    return du


def diffusion_chain(u, p, t):
    # zero boundary values at both ends of the chain
    n = u.shape[0]
    du = np.empty(n)
    for i in range(n):
        left = u[i - 1] if i > 0 else 0.0
        right = u[i + 1] if i < n - 1 else 0.0
        du[i] = p * (left - 2.0 * u[i] + right)
    return du
