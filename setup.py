from setuptools import find_packages, setup


version: dict = dict()
with open("./geomphantoms/version.py") as fp:
    exec(fp.read(), version)


def get_long_description():
    with open("README.md", "r") as fh:
        long_description = fh.read()
    return long_description


def get_install_requires():
    return ["torch", "numpy", "scipy", "nibabel", "imageio", "tifffile"]


def get_entry_points():
    entry_points = {
        "console_scripts": ["geomphantoms=geomphantoms.cli.main:main"],
    }
    return entry_points


setup(
    name="geomphantoms",
    packages=find_packages(exclude=("tests", "tests.*")),
    version=version["__version__"],
    description="geomphantoms: geometric phantoms for medical imaging",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="MIT",
    zip_safe=False,
    python_requires=">=3.8",
    install_requires=get_install_requires(),
    extras_require={"test": ["pytest"]},
    entry_points=get_entry_points(),
    classifiers=[
        "Intended Audience :: Healthcare Industry",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
        "Topic :: Scientific/Engineering :: Image Processing",
        "Programming Language :: Python :: 3",
    ],
)
