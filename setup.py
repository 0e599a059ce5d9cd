import os

import setuptools

version = {}
with open(os.path.join("ode_sampler", "version.py"), "r", encoding="utf-8") as fh:
    exec(fh.read(), version)

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name=version["PACKAGE_NAME"],
    version=version["PACKAGE_VERSION"],
    author=version["PACKAGE_AUTHOR"],
    author_email="nicho.junge@gmail.com",
    description="A small Python package for solving ODE initial value problems and sampling their solutions.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/njunge94/ode-sampler",
    packages=setuptools.find_packages(include=["ode_sampler", "ode_sampler.*"]),
    classifiers=[
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Intended Audience :: Developers',
        'Intended Audience :: Education',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        "Operating System :: OS Independent",
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Software Development',
        'Topic :: Software Development :: Libraries',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    python_requires='>=3.8',
    install_requires=[
        "absl-py",
        "pandas",
        "numpy",
        "scipy",
        "tqdm",
        "tabulate",
        "numba"
    ],
    extras_require={
        "testing": ["pytest"]
    }
)
