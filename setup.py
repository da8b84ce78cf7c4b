import setuptools

setuptools.setup(
    name="gdcls",
    version="2024.0.1",
    description="Non-negative matrix factorization by Gradient Descent with Constrained Least Squares (GDCLS): a "
                "regularized least-squares solve for H alternated with a multiplicative update of W, with "
                "continuation from caller-held state, product-preserving normalization and basis interpretation.",
    packages=setuptools.find_namespace_packages(include=["gdcls", "gdcls.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "scipy",
        "pandas",
        "tqdm",
        "psutil",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
