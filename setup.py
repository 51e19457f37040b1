import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="memgram",
    version="0.0.1",
    description="Binary structures inspector driven by a grammar",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=['tests']),
    python_requires='>=3.8',
    install_requires=[
        'capstone',
        'bitstring>=3.1',
        'click',
        'rich',
        'tomli; python_version < "3.11"',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'memgram = memgram.cli:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GPLv2 License",
        "Operating System :: OS Independent",
    ],
)
