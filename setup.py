import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="voxstruct",
    version="0.0.1",
    author="Gianluca Pacchiella",
    author_email="gp@ktln2.org",
    description="MagicaVoxel VOX files for humans",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/gipi/voxstruct",
    packages=setuptools.find_packages(exclude=['tests']),
    install_requires=[
        'pillow',
    ],
    extras_require={
        'tests': [
            'pytest',
        ],
    },
    scripts=[
        'scripts/voxdump.py',
    ],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GPLv2 License",
        "Operating System :: OS Independent",
    ],
)
