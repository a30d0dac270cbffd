import os

import setuptools

# Make sure that README.md decodes in environments that use the C locale
# (which implies ASCII), by explicitly giving the encoding.
with open(os.path.join(os.path.dirname(__file__), "README.md"), encoding="utf-8") as f:
    long_description = f.read()


setuptools.setup(
    name="yacurses",
    # MAJOR.MINOR.PATCH, per http://semver.org
    version="0.1.0",
    description="A safe session layer over the curses terminal library",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="yacurses contributors",
    keywords="curses, ncurses, terminal, tui",
    license="ISC",
    py_modules=(
        "yacurses",
        "yacurses_demo",
    ),
    entry_points={
        "console_scripts": ("yacurses-demo = yacurses_demo:main",)
    },
    # Note: windows-curses is not installed automatically on Windows, since
    # it isn't available for every Python there (MSYS2, for example)
    python_requires=">=3.6",
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Terminals",
        "Topic :: Software Development :: User Interfaces",
        "License :: OSI Approved :: ISC License (ISCL)",
        "Operating System :: POSIX",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.6",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Programming Language :: Python :: Implementation :: PyPy",
    ],
)
