# this only installs the lammps_access python package
# it assumes the LAMMPS shared library is already installed
from setuptools import setup
from setuptools.dist import Distribution
import os

class BinaryDistribution(Distribution):
    """Wrapper to enforce creating a binary package"""
    def has_ext_modules(self):
        return True

with open("README", "r") as fh:
    long_description = fh.read()

# bundle the shared library with the package when requested
libname = os.environ.get("LAMMPS_SHARED_LIB")
if libname:
    pkgdata = {'lammps_access': [ libname ]}
    bdist = BinaryDistribution
else:
    pkgdata = {}
    bdist = Distribution

setup(
    name = "lammps-access",
    version = "1.0.0",
    url = "https://www.lammps.org",
    description = "Typed NumPy access to the data of a running LAMMPS instance",
    long_description = long_description,
    long_description_content_type = "text/plain",
    classifiers = [
        "Programming Language :: Python :: 3",
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
        "Operating System :: OS Independent",
    ],
    license = "GPL",
    python_requires = ">=3.8",
    packages = ['lammps_access'],
    package_data = pkgdata,
    distclass = bdist,
    install_requires = ['numpy'],
    extras_require = {
        'mpi': ['mpi4py>=2.0'],
    },
)
