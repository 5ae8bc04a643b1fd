import os

from setuptools import setup

# The arithmetic core can be compiled with mypyc, set QUADINT_USE_MYPYC=1 (needs mypy and a C compiler).
ext_modules = []
if os.environ.get("QUADINT_USE_MYPYC") == "1":
    from mypyc.build import mypycify

    ext_modules = mypycify([
        "quadint/quad.py",
        "quadint/ring.py",
        "quadint/symbols.py",
    ])

setup(
    name="quadint",
    version="0.1.0",
    description="Exact quadratic integers with Euclidean GCD, factorization, units and class numbers",
    packages=["quadint"],
    python_requires=">=3.9",
    install_requires=[
        "sympy>=1.9",
    ],
    extras_require={
        "test": ["pytest"],
        "mypyc": ["mypy"],
    },
    ext_modules=ext_modules,

    license="MIT",
)
