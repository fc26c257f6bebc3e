# ----------------------------------------------------------------------
#   LAMMPS - Large-scale Atomic/Molecular Massively Parallel Simulator
#   https://www.lammps.org/ Sandia National Laboratories
#   LAMMPS Development team: developers@lammps.org
#
#   Copyright (2003) Sandia Corporation.  Under the terms of Contract
#   DE-AC04-94AL85000 with Sandia Corporation, the U.S. Government retains
#   certain rights in this software.  This software is distributed under
#   the GNU General Public License.
#
#   See the README file in the top-level LAMMPS directory.
# -------------------------------------------------------------------------
"""Location and loading of the LAMMPS shared library.

The path to the shared library is process-wide state.  It may be changed
with :py:func:`set_library` until the library is loaded by the first
:py:class:`LMP <lammps_access.core.LMP>` instance.  Afterwards the loaded
library stays in use until the Python process is restarted and a change
only produces a warning.
"""

import logging
import os
import platform
import warnings
from ctypes import CDLL, RTLD_GLOBAL, POINTER, c_void_p, c_char_p, c_int, c_double
from ctypes.util import find_library

logger = logging.getLogger(__name__)

_library_path = None
_library = None

# -------------------------------------------------------------------------

def _shared_lib_extension():
  system = platform.system()
  if system == "Darwin":
    return ".dylib"
  elif system == "Windows":
    return ".dll"
  return ".so"

# -------------------------------------------------------------------------

def locate(name=''):
  """Return the default path of the LAMMPS shared library

  The ``LAMMPS_SHARED_LIB`` environment variable takes precedence.
  Otherwise a shared library installed next to this package is used
  and as a last resort the bare library name, which leaves the search
  to the dynamic loader (``LD_LIBRARY_PATH`` and friends).

  :param name: "machine" name of the shared LAMMPS library ("mpi" selects ``liblammps_mpi.so``)
  :type  name: string
  :return: path or file name of the shared library
  :rtype: string
  """
  modpath = os.path.dirname(os.path.abspath(__file__))

  envlib = os.environ.get("LAMMPS_SHARED_LIB")
  if envlib:
    if not os.path.isabs(envlib) and os.path.isfile(os.path.join(modpath, envlib)):
      return os.path.join(modpath, envlib)
    return envlib

  if name:
    libname = "liblammps_%s" % name
  else:
    libname = "liblammps"

  for lib_ext in (".so", ".dylib", ".dll"):
    libpath = os.path.join(modpath, libname + lib_ext)
    if os.path.isfile(libpath):
      return libpath

  if not name:
    found = find_library("lammps")
    if found:
      return found
  return libname + _shared_lib_extension()

# -------------------------------------------------------------------------

def get_library():
  """Return the path of the shared library that is or will be loaded"""
  if _library_path:
    return _library_path
  return locate()

# -------------------------------------------------------------------------

def set_library(path):
  """Select the shared library to be loaded by the next :py:class:`LMP` instance

  Once the library has been loaded, the new path only takes effect after
  restarting the Python interpreter and a :py:class:`UserWarning` is issued.

  :param path: path of the LAMMPS shared library
  :type  path: string
  """
  global _library_path
  if _library is not None:
    warnings.warn("LAMMPS library path changed, you will need to restart Python "
                  "for the change to take effect", UserWarning, stacklevel=2)
  _library_path = path

# -------------------------------------------------------------------------

def is_loaded():
  """Report whether the shared library was already loaded in this process"""
  return _library is not None

# -------------------------------------------------------------------------

def load():
  """Load the LAMMPS shared library once and declare the C-library prototypes

  :return: the loaded library
  :rtype: ctypes.CDLL
  """
  global _library
  if _library is None:
    libpath = get_library()
    logger.debug("loading LAMMPS shared library from %s", libpath)
    lib = CDLL(libpath, RTLD_GLOBAL)
    _declare_prototypes(lib)
    _library = lib
  return _library

# -------------------------------------------------------------------------
# declare all argument and return types for all library methods here.
# functions returning pointers to data of varying type return c_void_p
# and the result is cast where it is used.

def _declare_prototypes(lib):
  lib.lammps_extract_setting.argtypes = [c_void_p, c_char_p]
  lib.lammps_extract_setting.restype = c_int

  lib.lammps_open.restype = c_void_p
  lib.lammps_open_no_mpi.argtypes = [c_int, POINTER(c_char_p), c_void_p]
  lib.lammps_open_no_mpi.restype = c_void_p
  lib.lammps_close.argtypes = [c_void_p]
  lib.lammps_close.restype = None
  lib.lammps_free.argtypes = [c_void_p]
  lib.lammps_free.restype = None
  lib.lammps_version.argtypes = [c_void_p]
  lib.lammps_version.restype = c_int

  lib.lammps_file.argtypes = [c_void_p, c_char_p]
  lib.lammps_file.restype = None
  lib.lammps_command.argtypes = [c_void_p, c_char_p]
  lib.lammps_command.restype = c_char_p
  lib.lammps_commands_list.argtypes = [c_void_p, c_int, POINTER(c_char_p)]
  lib.lammps_commands_list.restype = None
  lib.lammps_commands_string.argtypes = [c_void_p, c_char_p]
  lib.lammps_commands_string.restype = None

  lib.lammps_has_error.argtypes = [c_void_p]
  lib.lammps_has_error.restype = c_int
  lib.lammps_get_last_error_message.argtypes = [c_void_p, c_char_p, c_int]
  lib.lammps_get_last_error_message.restype = c_int

  lib.lammps_config_has_mpi_support.argtypes = []
  lib.lammps_config_has_mpi_support.restype = c_int
  lib.lammps_get_mpi_comm.argtypes = [c_void_p]
  lib.lammps_get_mpi_comm.restype = c_int

  lib.lammps_get_natoms.argtypes = [c_void_p]
  lib.lammps_get_natoms.restype = c_double

  lib.lammps_extract_box.argtypes = \
    [c_void_p,POINTER(c_double),POINTER(c_double),
     POINTER(c_double),POINTER(c_double),POINTER(c_double),
     POINTER(c_int),POINTER(c_int)]
  lib.lammps_extract_box.restype = None
  lib.lammps_reset_box.argtypes = \
    [c_void_p,POINTER(c_double),POINTER(c_double),c_double,c_double,c_double]
  lib.lammps_reset_box.restype = None

  lib.lammps_extract_global_datatype.argtypes = [c_void_p, c_char_p]
  lib.lammps_extract_global_datatype.restype = c_int
  lib.lammps_extract_global.argtypes = [c_void_p, c_char_p]
  lib.lammps_extract_global.restype = c_void_p

  lib.lammps_extract_atom_datatype.argtypes = [c_void_p, c_char_p]
  lib.lammps_extract_atom_datatype.restype = c_int
  lib.lammps_extract_atom.argtypes = [c_void_p, c_char_p]
  lib.lammps_extract_atom.restype = c_void_p
  # only available in recent LAMMPS versions
  if hasattr(lib, "lammps_extract_atom_size"):
    lib.lammps_extract_atom_size.argtypes = [c_void_p, c_char_p, c_int]
    lib.lammps_extract_atom_size.restype = c_int

  lib.lammps_extract_compute.argtypes = [c_void_p, c_char_p, c_int, c_int]
  lib.lammps_extract_compute.restype = c_void_p
  lib.lammps_extract_fix.argtypes = [c_void_p, c_char_p, c_int, c_int, c_int, c_int]
  lib.lammps_extract_fix.restype = c_void_p
  lib.lammps_extract_variable_datatype.argtypes = [c_void_p, c_char_p]
  lib.lammps_extract_variable_datatype.restype = c_int
  lib.lammps_extract_variable.argtypes = [c_void_p, c_char_p, c_char_p]
  lib.lammps_extract_variable.restype = c_void_p

  lib.lammps_gather.argtypes = [c_void_p,c_char_p,c_int,c_int,c_void_p]
  lib.lammps_gather.restype = None
  lib.lammps_gather_subset.argtypes = \
    [c_void_p,c_char_p,c_int,c_int,c_int,POINTER(c_int),c_void_p]
  lib.lammps_gather_subset.restype = None
  lib.lammps_scatter.argtypes = [c_void_p,c_char_p,c_int,c_int,c_void_p]
  lib.lammps_scatter.restype = None
  lib.lammps_scatter_subset.argtypes = \
    [c_void_p,c_char_p,c_int,c_int,c_int,POINTER(c_int),c_void_p]
  lib.lammps_scatter_subset.restype = None

  lib.lammps_gather_bonds.argtypes = [c_void_p,c_void_p]
  lib.lammps_gather_bonds.restype = None
  lib.lammps_gather_angles.argtypes = [c_void_p,c_void_p]
  lib.lammps_gather_angles.restype = None
  lib.lammps_gather_dihedrals.argtypes = [c_void_p,c_void_p]
  lib.lammps_gather_dihedrals.restype = None
  lib.lammps_gather_impropers.argtypes = [c_void_p,c_void_p]
  lib.lammps_gather_impropers.restype = None

  lib.lammps_create_atoms.argtypes = \
    [c_void_p,c_int,c_void_p,c_void_p,c_void_p,c_void_p,c_void_p,c_int]
  lib.lammps_create_atoms.restype = c_int

  lib.lammps_has_id.argtypes = [c_void_p, c_char_p, c_char_p]
  lib.lammps_has_id.restype = c_int
  lib.lammps_id_count.argtypes = [c_void_p, c_char_p]
  lib.lammps_id_count.restype = c_int
  lib.lammps_id_name.argtypes = [c_void_p, c_char_p, c_int, c_char_p, c_int]
  lib.lammps_id_name.restype = c_int

  lib.lammps_find_pair_neighlist.argtypes = [c_void_p, c_char_p, c_int, c_int, c_int]
  lib.lammps_find_pair_neighlist.restype  = c_int
  lib.lammps_find_fix_neighlist.argtypes = [c_void_p, c_char_p, c_int]
  lib.lammps_find_fix_neighlist.restype  = c_int
  lib.lammps_find_compute_neighlist.argtypes = [c_void_p, c_char_p, c_int]
  lib.lammps_find_compute_neighlist.restype  = c_int
  lib.lammps_neighlist_num_elements.argtypes = [c_void_p, c_int]
  lib.lammps_neighlist_num_elements.restype  = c_int
  lib.lammps_neighlist_element_neighbors.argtypes = \
    [c_void_p, c_int, c_int, POINTER(c_int), POINTER(c_int), POINTER(POINTER(c_int))]
  lib.lammps_neighlist_element_neighbors.restype  = None

  lib.lammps_fix_external_set_energy_global.argtypes = [c_void_p, c_char_p, c_double]
  lib.lammps_fix_external_set_energy_global.restype = None
  lib.lammps_fix_external_set_virial_global.argtypes = [c_void_p, c_char_p, POINTER(c_double)]
  lib.lammps_fix_external_set_virial_global.restype = None
  lib.lammps_fix_external_set_vector_length.argtypes = [c_void_p, c_char_p, c_int]
  lib.lammps_fix_external_set_vector_length.restype = None
  lib.lammps_fix_external_set_vector.argtypes = [c_void_p, c_char_p, c_int, c_double]
  lib.lammps_fix_external_set_vector.restype = None
