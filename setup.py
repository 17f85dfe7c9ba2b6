import os
import pathlib
import sys

from setuptools import extension as setuptools_ext
from setuptools import setup
from setuptools.command import build_ext as setuptools_build_ext


_ROOT = pathlib.Path(__file__).parent


with open(str(_ROOT / "README.rst")) as f:
    readme = f.read()


with open(str(_ROOT / "bnfish" / "_version.py")) as f:
    for line in f:
        if line.startswith("__version__ ="):
            _, _, version = line.partition("=")
            VERSION = version.strip(" \n'\"")
            break
    else:
        raise RuntimeError(
            "unable to read the version from bnfish/_version.py"
        )


USE_MYPYC = False
MYPY_DEPENDENCY = "mypy>=0.910"
setup_requires = []
ext_modules = []

if (
    os.environ.get("BNFISH_USE_MYPYC", None) in {"true", "1", "on"}
    or "--use-mypyc" in sys.argv
):
    setup_requires.append(MYPY_DEPENDENCY)
    # Fool setuptools into calling build_ext.  The actual list of
    # extensions would get replaced by mypycify.
    ext_modules.append(
        setuptools_ext.Extension("bnfish.foo", ["bnfish/foo.c"])
    )
    USE_MYPYC = True


class build_ext(setuptools_build_ext.build_ext):  # type: ignore
    def finalize_options(self) -> None:
        # finalize_options() may be called multiple times on the
        # same command object, so make sure not to override previously
        # set options.
        if getattr(self, "_initialized", False):
            return

        if USE_MYPYC:
            try:
                from mypyc.build import mypycify
            except ImportError:
                raise RuntimeError(
                    "please install {} to compile bnfish from source".format(
                        MYPY_DEPENDENCY
                    )
                )

            self.distribution.ext_modules = mypycify(
                [
                    "bnfish/rdparser.py",
                    "bnfish/scanner.py",
                ],
            )

        super(build_ext, self).finalize_options()


setup(
    name="bnfish",
    version=VERSION,
    python_requires=">=3.7.0",
    license="MIT",
    description="A pure-Python parser construction engine: BNF-like "
    "grammars, a backtracking recursive-descent matcher and AST visitors.",
    long_description=readme,
    long_description_content_type="text/x-rst",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Compilers",
        "Topic :: Text Processing :: General",
    ],
    packages=["bnfish", "bnfish.tests", "bnfish.tests.specs"],
    package_data={"bnfish": ["py.typed"]},
    setup_requires=setup_requires,
    ext_modules=ext_modules,
    install_requires=["mypy_extensions"],
    extras_require={
        "test": [
            "flake8",
            MYPY_DEPENDENCY,
        ]
    },
    cmdclass={"build_ext": build_ext},
)
