"""
lammps_access module global members:

.. data:: __version__

   Version string of the installed lammps-access package, "0" when
   used from a source checkout.
"""

from .constants import *                # lgtm [py/polluting-import]
from .core import LMP, ExceptionCheck
from .data import Box, NeighList, encode_image_flags, decode_image_flags
from .errors import LAMMPSError, MPIAbortException, ValidationError, InvalidHandleError
from .library import get_library, set_library

def get_version_string():
    from importlib.metadata import version, PackageNotFoundError
    try:
        return version('lammps-access')
    except PackageNotFoundError:
        # not installed, e.g. when running from the source tree
        return "0"

__version__ = get_version_string()
