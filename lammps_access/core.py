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
# Typed Python wrapper for the LAMMPS library via ctypes and NumPy

import logging
from ctypes import *                    # lgtm [py/polluting-import]

import numpy as np

from . import library
from . import views
from .constants import *                # lgtm [py/polluting-import]
from .data import Box, NeighList
from .errors import LAMMPSError, MPIAbortException, ValidationError, InvalidHandleError

logger = logging.getLogger(__name__)

# number of columns of per-atom arrays, used when the library cannot report them
_ATOM_WIDTHS = { 'x':3, 'v':3, 'f':3, 'x0':3, 'omega':3, 'angmom':3, 'torque':3,
                 'csforce':3, 'vforce':3, 'vest':3, 'mu':4, 'quat':4,
                 'smd_data_9':9, 'smd_stress':6 }

_DTYPE_NAMES = { LAMMPS_INT:'LAMMPS_INT', LAMMPS_INT_2D:'LAMMPS_INT_2D',
                 LAMMPS_DOUBLE:'LAMMPS_DOUBLE', LAMMPS_DOUBLE_2D:'LAMMPS_DOUBLE_2D',
                 LAMMPS_INT64:'LAMMPS_INT64', LAMMPS_INT64_2D:'LAMMPS_INT64_2D',
                 LAMMPS_STRING:'LAMMPS_STRING' }

_VAR_NAMES = { LMP_VAR_EQUAL:'equal', LMP_VAR_ATOM:'atom',
               LMP_VAR_VECTOR:'vector', LMP_VAR_STRING:'string' }

# -------------------------------------------------------------------------

class ExceptionCheck:
  """Utility class to rethrow LAMMPS C++ exceptions as Python exceptions"""
  def __init__(self, lmp):
    self.lmp = lmp

  def __enter__(self):
    pass

  def __exit__(self, exc_type, exc_value, traceback):
    if self.lmp.lib.lammps_has_error(self.lmp.lmp):
      raise self.lmp._lammps_exception

# -------------------------------------------------------------------------

def _gather_type(dtype):
  try:
    dtype = np.dtype(dtype)
  except TypeError:
    raise ValidationError("Unsupported element type {}".format(dtype))
  if dtype not in (np.dtype(np.int32), np.dtype(np.float64)):
    raise ValidationError("Unsupported element type {}, use numpy.int32 or numpy.float64".format(dtype))
  return dtype

# -------------------------------------------------------------------------

class LMP(object):
  """Create an instance of LAMMPS and access its data through NumPy arrays

  .. _mpi4py_docs: https://mpi4py.readthedocs.io/

  The instance is created through the :cpp:func:`lammps_open_no_mpi` or
  :cpp:func:`lammps_open` function of the LAMMPS C-library interface.
  The shared library is loaded on first use from the location configured
  with :py:func:`lammps_access.library.set_library`.

  Arrays returned by the ``extract_*`` methods are views of memory owned by
  LAMMPS.  They become invalid when LAMMPS reallocates its storage, e.g.
  after commands that change the number of atoms, and when the instance
  is closed.  Copy them if the data is needed afterwards.

  An instance must not be used from several threads at the same time.

  :param cmdargs: list of command line arguments to be passed to the :cpp:func:`lammps_open_no_mpi` function.  The executable name is automatically added.
  :type  cmdargs: list
  :param comm: MPI communicator (as provided by `mpi4py <mpi4py_docs_>`_). ``None`` means use ``MPI_COMM_WORLD`` implicitly.
  :type  comm: MPI_Comm
  """

  # -------------------------------------------------------------------------
  # create an instance of LAMMPS

  def __init__(self,cmdargs=None,comm=None):
    self.comm = comm
    self.opened = 0
    self.lmp = None
    self.lib = None
    self.callback = {}

    self.lib = library.load()

    # set default types
    # needed in later declarations
    self.c_bigint = get_ctypes_int(self.lib.lammps_extract_setting(None, b"bigint"))
    self.c_tagint = get_ctypes_int(self.lib.lammps_extract_setting(None, b"tagint"))
    self.c_imageint = get_ctypes_int(self.lib.lammps_extract_setting(None, b"imageint"))

    self.lib.lammps_encode_image_flags.argtypes = [c_int, c_int, c_int]
    self.lib.lammps_encode_image_flags.restype = self.c_imageint
    self.lib.lammps_decode_image_flags.argtypes = [self.c_imageint, POINTER(c_int*3)]
    self.lib.lammps_decode_image_flags.restype = None

    # add way to insert Python callback for fix external
    self.FIX_EXTERNAL_CALLBACK_FUNC = CFUNCTYPE(None, py_object, self.c_bigint, c_int, POINTER(self.c_tagint), POINTER(POINTER(c_double)), POINTER(POINTER(c_double)))
    self.lib.lammps_set_fix_external_callback.argtypes = [c_void_p, c_char_p, self.FIX_EXTERNAL_CALLBACK_FUNC, py_object]
    self.lib.lammps_set_fix_external_callback.restype = None

    # detect if Python is using a version of mpi4py that can pass communicators
    # only needed if LAMMPS has been compiled with MPI support.
    self.has_mpi4py = False
    if self.has_mpi_support:
      try:
        from mpi4py import __version__ as mpi4py_version
        self.has_mpi4py = int(mpi4py_version.split('.')[0]) >= 2
      except ImportError:
        # ignore failing import
        pass

    myargs = ["lammps".encode()]
    for arg in (cmdargs or []):
      if type(arg) is str:
        myargs.append(arg.encode())
      elif type(arg) is bytes:
        myargs.append(arg)
      else:
        raise TypeError('Unsupported cmdargs type ', type(arg))
    narg = len(myargs)
    cargs = (c_char_p*(narg+1))(*myargs)
    cargs[narg] = None

    # with mpi4py v2+, we can pass MPI communicators to LAMMPS
    # need to adjust for type of MPI communicator object
    # allow for int (like MPICH) or void* (like OpenMPI)
    if comm is not None:
      if not self.has_mpi_support:
        raise LAMMPSError('LAMMPS not compiled with real MPI library')
      if not self.has_mpi4py:
        raise LAMMPSError('Python mpi4py version is not 2 or later')
      from mpi4py import MPI
      if MPI._sizeof(MPI.Comm) == sizeof(c_int):
        MPI_Comm = c_int
      else:
        MPI_Comm = c_void_p

      # Detect whether LAMMPS and mpi4py definitely use different MPI libs
      if sizeof(MPI_Comm) != self.lib.lammps_config_has_mpi_support():
        raise LAMMPSError('Inconsistent MPI library in LAMMPS and mpi4py')

      self.lib.lammps_open.argtypes = [c_int, POINTER(c_char_p), MPI_Comm, c_void_p]
      comm_ptr = MPI._addressof(comm)
      comm_val = MPI_Comm.from_address(comm_ptr)
      self.lmp = c_void_p(self.lib.lammps_open(narg,cargs,comm_val,None))
    else:
      if self.has_mpi4py:
        from mpi4py import MPI
        self.comm = MPI.COMM_WORLD
      self.lmp = c_void_p(self.lib.lammps_open_no_mpi(narg,cargs,None))

    if self.lmp:
      self.opened = 1

    # check if library initilialization failed
    if self.lib.lammps_has_error(self.lmp):
      exc = self._lammps_exception
      self.close()
      raise exc
    if not self.lmp:
      raise LAMMPSError("Failed to initialize LAMMPS object")

    logger.debug("created LAMMPS instance, version %d", self.lib.lammps_version(self.lmp))

  # -------------------------------------------------------------------------
  # shut-down LAMMPS instance

  def __del__(self):
    self.close()

  # -------------------------------------------------------------------------
  # context manager implementation

  def __enter__(self):
    return self

  def __exit__(self, ex_type, ex_value, ex_traceback):
    self.close()

  # -------------------------------------------------------------------------
  # a LAMMPS instance cannot be serialized, so deserialized objects are closed

  def __getstate__(self):
    return { 'opened': 0 }

  def __setstate__(self, state):
    self.comm = None
    self.opened = 0
    self.lmp = None
    self.lib = None
    self.callback = {}

  # -------------------------------------------------------------------------

  @property
  def is_valid(self):
    """Report whether this object refers to a live LAMMPS instance

    :return: False after :py:meth:`close` or deserialization, otherwise True
    :rtype: bool
    """
    return bool(self.lmp) and self.opened == 1

  def _check_valid(self):
    if not self.is_valid:
      raise InvalidHandleError()

  # -------------------------------------------------------------------------

  def close(self):
    """Explicitly delete a LAMMPS instance through the C-library interface.

    This is a wrapper around the :cpp:func:`lammps_close` function of the C-library interface.
    Calling it more than once is harmless.  Any later use of this object
    raises :py:class:`InvalidHandleError`.
    """
    if self.lmp and self.opened:
      logger.debug("closing LAMMPS instance")
      self.lib.lammps_close(self.lmp)
    self.lmp = None
    self.opened = 0
    self.callback = {}

  # -------------------------------------------------------------------------

  @property
  def _lammps_exception(self):
    sb = create_string_buffer(1024)
    error_type = self.lib.lammps_get_last_error_message(self.lmp, sb, 1024)
    error_msg = sb.value.decode().strip()

    if error_type == 2:
      return MPIAbortException(error_msg)
    return LAMMPSError(error_msg)

  # -------------------------------------------------------------------------

  def version(self):
    """Return a numerical representation of the LAMMPS version in use.

    This is a wrapper around the :cpp:func:`lammps_version` function of the C-library interface.

    :return: version number
    :rtype:  int
    """
    self._check_valid()
    return self.lib.lammps_version(self.lmp)

  # -------------------------------------------------------------------------

  @property
  def has_mpi_support(self):
    """ Report whether the LAMMPS shared library was compiled with a
    real MPI library or in serial.

    :return: False when compiled with MPI STUBS, otherwise True
    :rtype: bool
    """
    if self.lib is None:
      raise InvalidHandleError()
    return self.lib.lammps_config_has_mpi_support() != 0

  # -------------------------------------------------------------------------

  def get_mpi_comm(self):
    """Get the MPI communicator in use by the current LAMMPS instance

    It will return ``None`` if either the LAMMPS library was compiled
    without MPI support or the mpi4py Python module is not available.

    :return: MPI communicator
    :rtype:  MPI_Comm
    """
    self._check_valid()
    if self.has_mpi4py and self.has_mpi_support:
      from mpi4py import MPI
      f_comm = self.lib.lammps_get_mpi_comm(self.lmp)
      return MPI.Comm.f2py(f_comm)
    return None

  # -------------------------------------------------------------------------

  def file(self, path):
    """Read LAMMPS commands from a file.

    This is a wrapper around the :cpp:func:`lammps_file` function of the C-library interface.

    :param path: Name of the file/path with LAMMPS commands
    :type path:  string
    """
    self._check_valid()
    if path: path = path.encode()
    else: return

    with ExceptionCheck(self):
      self.lib.lammps_file(self.lmp, path)

  # -------------------------------------------------------------------------

  def command(self,cmd):
    """Process LAMMPS input commands.

    A list of strings is handed to :py:meth:`commands_list`, a string with
    multiple lines to :py:meth:`commands_string`, and a single line
    to the :cpp:func:`lammps_command` function of the C-library interface.

    :param cmd: one or more lammps commands
    :type cmd:  string or list of strings
    """
    self._check_valid()
    if isinstance(cmd, (list, tuple)):
      return self.commands_list(cmd)
    if '\n' in cmd:
      return self.commands_string(cmd)
    if cmd: cmd = cmd.encode()
    else: return

    with ExceptionCheck(self):
      self.lib.lammps_command(self.lmp,cmd)

  # -------------------------------------------------------------------------

  def commands_list(self,cmdlist):
    """Process multiple LAMMPS input commands from a list of strings.

    This is a wrapper around the :cpp:func:`lammps_commands_list` function of
    the C-library interface.

    :param cmdlist: a list of lammps commands
    :type cmdlist:  list of strings
    """
    self._check_valid()
    cmds = [x.encode() for x in cmdlist if type(x) is str]
    narg = len(cmds)
    args = (c_char_p * narg)(*cmds)

    with ExceptionCheck(self):
      self.lib.lammps_commands_list(self.lmp,narg,args)

  # -------------------------------------------------------------------------

  def commands_string(self,multicmd):
    """Process a block of LAMMPS input commands from a string.

    This is a wrapper around the :cpp:func:`lammps_commands_string`
    function of the C-library interface.

    :param multicmd: text block of lammps commands
    :type multicmd:  string
    """
    self._check_valid()
    if type(multicmd) is str: multicmd = multicmd.encode()

    with ExceptionCheck(self):
      self.lib.lammps_commands_string(self.lmp,c_char_p(multicmd))

  # -------------------------------------------------------------------------

  def get_natoms(self):
    """Get the total number of atoms in the LAMMPS instance.

    Will be precise up to 53-bit signed integer due to the
    underlying :cpp:func:`lammps_get_natoms` function returning a double.

    :return: number of atoms
    :rtype: int
    """
    self._check_valid()
    return int(self.lib.lammps_get_natoms(self.lmp))

  # -------------------------------------------------------------------------

  def extract_setting(self, name):
    """Query LAMMPS about global settings that can be expressed as an integer.

    This is a wrapper around the :cpp:func:`lammps_extract_setting`
    function of the C-library interface.  Its documentation includes
    a list of the supported keywords.

    :param name: name of the setting
    :type name:  string
    :return: value of the setting, -1 for unknown settings
    :rtype: int
    """
    self._check_valid()
    if name: name = name.encode()
    else: return None
    return int(self.lib.lammps_extract_setting(self.lmp,name))

  # -------------------------------------------------------------------------
  # extract global info datatype

  def extract_global_datatype(self, name):
    """Retrieve global property datatype from LAMMPS

    This is a wrapper around the :cpp:func:`lammps_extract_global_datatype`
    function of the C-library interface.

    :param name: name of the property
    :type name:  string
    :return: data type of global property (see :ref:`py_datatype_constants`), -1 if unknown
    :rtype: int
    """
    self._check_valid()
    if name: name = name.encode()
    else: return None
    return self.lib.lammps_extract_global_datatype(self.lmp, name)

  # -------------------------------------------------------------------------
  # extract global info

  def extract_global(self, name, dtype=LAMMPS_AUTODETECT):
    """Access global properties of LAMMPS

    This is a wrapper around the :cpp:func:`lammps_extract_global` function
    of the C-library interface.  Numerical properties are returned as a 1d
    NumPy array with direct access to the data inside LAMMPS, strings as
    Python string.  The data type is determined by asking the library, if
    ``dtype`` is given it must match.

    :param name: name of the property
    :type name:  string
    :param dtype: expected data type (see :ref:`py_datatype_constants`)
    :type dtype:  int, optional
    :return: view of the property or string
    :rtype: numpy.array or string
    """
    actual = self.extract_global_datatype(name)
    if actual is None or actual < 0:
      raise LAMMPSError("Unknown global property '{}'".format(name))
    if dtype == LAMMPS_AUTODETECT:
      dtype = actual
    elif dtype != actual:
      raise ValidationError("Global property '{}' has data type {}, not {}".format(
        name, _DTYPE_NAMES.get(actual, actual), _DTYPE_NAMES.get(dtype, dtype)))

    # set length of vector for items that are not a scalar
    vec_dict = { 'boxlo':3, 'boxhi':3, 'sublo':3, 'subhi':3,
                 'sublo_lambda':3, 'subhi_lambda':3, 'periodicity':3,
                 'special_lj':4, 'special_coul':4, 'procgrid':3 }
    if name in vec_dict:
      veclen = vec_dict[name]
    elif name == 'respa_dt':
      veclen = int(self.extract_global('respa_levels',LAMMPS_INT)[0])
    elif name == 'sametag':
      veclen = self.extract_setting('nall')
    else:
      veclen = 1

    ptr = self.lib.lammps_extract_global(self.lmp, name.encode())
    if not ptr:
      raise LAMMPSError("Global property '{}' is not available".format(name))
    if dtype == LAMMPS_STRING:
      return cast(ptr, c_char_p).value.decode('utf-8')
    return views.view(ptr, views.Descriptor(dtype, 1, 1, veclen, 0))

  # -------------------------------------------------------------------------
  # extract per-atom info datatype

  def extract_atom_datatype(self, name):
    """Retrieve per-atom property datatype from LAMMPS

    This is a wrapper around the :cpp:func:`lammps_extract_atom_datatype`
    function of the C-library interface.

    :param name: name of the property
    :type name:  string
    :return: data type of per-atom property (see :ref:`py_datatype_constants`), -1 if unknown
    :rtype: int
    """
    self._check_valid()
    if name: name = name.encode()
    else: return None
    return self.lib.lammps_extract_atom_datatype(self.lmp, name)

  # -------------------------------------------------------------------------

  def _atom_size(self, name, which):
    if not hasattr(self.lib, "lammps_extract_atom_size"):
      return -1
    return self.lib.lammps_extract_atom_size(self.lmp, name.encode(), which)

  def _atom_width(self, name):
    width = self._atom_size(name, LMP_SIZE_COLS)
    if width <= 0:
      width = _ATOM_WIDTHS.get(name, 0)
    if width <= 0:
      raise LAMMPSError("Cannot determine the number of columns of per-atom property '{}'".format(name))
    return width

  def _atom_descriptor(self, name, with_ghosts=False):
    dtype = self.extract_atom_datatype(name)
    if dtype is None or dtype < 0:
      raise LAMMPSError("Unknown per-atom property '{}'".format(name))

    # per-type masses are stored from index 1 to ntypes
    if name == "mass":
      if with_ghosts:
        raise ValidationError("Per-type property 'mass' has no data for ghost atoms")
      return views.Descriptor(dtype, 1, 1, self.extract_setting("ntypes"), 1)

    rows = self.extract_setting("nall" if with_ghosts else "nlocal")
    # the engine reports -1 for sizes it does not track
    allocated = self._atom_size(name, LMP_SIZE_ROWS)
    if 0 <= allocated < rows:
      if with_ghosts:
        raise ValidationError("Per-atom property '{}' is not available for ghost atoms".format(name))
      raise ValidationError("Per-atom property '{}' has {} rows, expected {}".format(name, allocated, rows))

    if views.is_2d(dtype):
      return views.Descriptor(dtype, 2, self._atom_width(name), rows, 0)
    return views.Descriptor(dtype, 1, 1, rows, 0)

  # -------------------------------------------------------------------------
  # extract per-atom info

  def extract_atom(self, name, dtype=LAMMPS_AUTODETECT, with_ghosts=False):
    """Access per-atom properties of LAMMPS as NumPy arrays

    This is a wrapper around the :cpp:func:`lammps_extract_atom`
    function of the C-library interface.  The layout of the property is
    determined by asking the library each time this method is called:
    vectors are returned as arrays of shape ``(nlocal,)``, per-atom arrays
    like ``x`` or custom ``i2_``/``d2_`` properties as ``(nlocal, ncols)``.
    When ``with_ghosts`` is True, ``nlocal`` is replaced by the number of
    local plus ghost atoms.  The per-type ``mass`` property has ``ntypes``
    elements, element 0 holds the mass of type 1.

    .. note::

       The returned array gives direct access to the storage in LAMMPS.
       It becomes invalid as soon as LAMMPS reallocates its per-atom
       data, e.g. when atoms are created, deleted, or migrate.

    :param name: name of the property
    :type name:  string
    :param dtype: expected data type (see :ref:`py_datatype_constants`)
    :type dtype:  int, optional
    :param with_ghosts: include ghost atoms
    :type with_ghosts:  bool, optional
    :return: view of the requested data
    :rtype: numpy.array
    """
    self._check_valid()
    desc = self._atom_descriptor(name, with_ghosts)
    if dtype != LAMMPS_AUTODETECT and dtype != desc.dtype:
      raise ValidationError("Per-atom property '{}' has data type {}, not {}".format(
        name, _DTYPE_NAMES.get(desc.dtype, desc.dtype), _DTYPE_NAMES.get(dtype, dtype)))

    ptr = self.lib.lammps_extract_atom(self.lmp, name.encode())
    a = views.view(ptr, desc)
    if a is None:
      raise LAMMPSError("Per-atom property '{}' is not allocated".format(name))
    return a

  # -------------------------------------------------------------------------

  def _compute_size(self, cid, cstyle, ctype):
    with ExceptionCheck(self):
      ptr = self.lib.lammps_extract_compute(self.lmp, cid.encode(), cstyle, ctype)
    if not ptr:
      raise LAMMPSError("Compute '{}' does not provide data of the requested style and type".format(cid))
    return cast(ptr, POINTER(c_int))[0]

  def extract_compute(self,cid,cstyle,ctype):
    """Access data of a LAMMPS compute

    This is a wrapper around the :cpp:func:`lammps_extract_compute`
    function of the C-library interface.  Global scalars are returned as
    an array with one element, vectors and arrays as 1d or 2d arrays
    with direct access to the data inside the compute.  Per-atom data
    has one row per local atom.  Requests for sizes return an integer.

    :param cid: compute ID
    :type cid:  string
    :param cstyle: style of the data retrieve (global, atom, or local), see :ref:`py_style_constants`
    :type cstyle:  int
    :param ctype: type or size of the returned data (scalar, vector, or array), see :ref:`py_type_constants`
    :type ctype:  int
    :return: requested data
    :rtype: numpy.array or int
    """
    self._check_valid()
    if not self.has_id("compute", cid):
      raise LAMMPSError("Unknown compute ID '{}'".format(cid))

    if ctype in (LMP_SIZE_VECTOR, LMP_SIZE_ROWS, LMP_SIZE_COLS):
      return self._compute_size(cid, cstyle, ctype)

    if ctype == LMP_TYPE_SCALAR:
      if cstyle != LMP_STYLE_GLOBAL:
        raise LAMMPSError("Compute '{}' does not provide a per-atom or local scalar".format(cid))
      nrows, ncols = 1, 0
    elif ctype == LMP_TYPE_VECTOR:
      if cstyle == LMP_STYLE_GLOBAL:
        nrows = self._compute_size(cid, cstyle, LMP_SIZE_VECTOR)
      elif cstyle == LMP_STYLE_ATOM:
        nrows = self.extract_setting("nlocal")
      else:
        nrows = self._compute_size(cid, cstyle, LMP_SIZE_ROWS)
      ncols = 0
    elif ctype == LMP_TYPE_ARRAY:
      ncols = self._compute_size(cid, cstyle, LMP_SIZE_COLS)
      if cstyle == LMP_STYLE_ATOM:
        nrows = self.extract_setting("nlocal")
      else:
        nrows = self._compute_size(cid, cstyle, LMP_SIZE_ROWS)
    else:
      raise ValidationError("Unknown compute data type {}".format(ctype))

    with ExceptionCheck(self):
      ptr = self.lib.lammps_extract_compute(self.lmp, cid.encode(), cstyle, ctype)
    if ncols:
      a = views.view(ptr, views.Descriptor(LAMMPS_DOUBLE_2D, 2, ncols, nrows, 0))
    else:
      a = views.darray(ptr, nrows)
    if a is None:
      raise LAMMPSError("Compute '{}' does not provide data of the requested style and type".format(cid))
    return a

  # -------------------------------------------------------------------------

  def extract_fix(self,fid,fstyle,ftype,nrow=0,ncol=0):
    """Access data of a LAMMPS fix

    This is a wrapper around the :cpp:func:`lammps_extract_fix`
    function of the C-library interface.  Global data is computed on
    demand by the fix and returned as a copy: the scalar, the vector
    element ``nrow``, or the array element ``(nrow, ncol)``.  Per-atom
    and local data is returned as view of the storage inside the fix.
    Requests for sizes return an integer.

    :param fid: fix ID
    :type fid:  string
    :param fstyle: style of the data retrieve (global, atom, or local), see :ref:`py_style_constants`
    :type fstyle:  int
    :param ftype: type or size of the returned data (scalar, vector, or array), see :ref:`py_type_constants`
    :type ftype:  int
    :param nrow: index of global vector element or row index of global array element
    :type nrow:  int
    :param ncol: column index of global array element
    :type ncol:  int
    :return: requested data
    :rtype: float, int, or numpy.array
    """
    self._check_valid()
    if not self.has_id("fix", fid):
      raise LAMMPSError("Unknown fix ID '{}'".format(fid))
    fid = fid.encode()

    def fetch(ftype, nrow=0, ncol=0):
      with ExceptionCheck(self):
        ptr = self.lib.lammps_extract_fix(self.lmp, fid, fstyle, ftype, nrow, ncol)
      if not ptr:
        raise LAMMPSError("Fix '{}' does not provide data of the requested style and type".format(fid.decode()))
      return ptr

    if ftype in (LMP_SIZE_VECTOR, LMP_SIZE_ROWS, LMP_SIZE_COLS):
      return cast(fetch(ftype), POINTER(c_int))[0]

    if fstyle == LMP_STYLE_GLOBAL:
      if ftype not in (LMP_TYPE_SCALAR, LMP_TYPE_VECTOR, LMP_TYPE_ARRAY):
        raise ValidationError("Unknown fix data type {}".format(ftype))
      # global data is computed on demand and must be freed
      ptr = fetch(ftype, nrow, ncol)
      result = cast(ptr, POINTER(c_double))[0]
      self.lib.lammps_free(ptr)
      return result

    if ftype == LMP_TYPE_VECTOR:
      if fstyle == LMP_STYLE_ATOM:
        nrows = self.extract_setting("nlocal")
      else:
        nrows = cast(fetch(LMP_SIZE_ROWS), POINTER(c_int))[0]
      a = views.darray(fetch(ftype) if nrows else None, nrows)
    elif ftype == LMP_TYPE_ARRAY:
      ncols = cast(fetch(LMP_SIZE_COLS), POINTER(c_int))[0]
      if fstyle == LMP_STYLE_ATOM:
        nrows = self.extract_setting("nlocal")
      else:
        nrows = cast(fetch(LMP_SIZE_ROWS), POINTER(c_int))[0]
      a = views.view(fetch(ftype) if nrows else None, views.Descriptor(LAMMPS_DOUBLE_2D, 2, ncols, nrows, 0))
    else:
      raise LAMMPSError("Fix '{}' does not provide a per-atom or local scalar".format(fid.decode()))
    return a

  # -------------------------------------------------------------------------

  def extract_variable(self, name, vartype=None, group=None):
    """ Evaluate a LAMMPS variable and return its data

    This function is a wrapper around the function
    :cpp:func:`lammps_extract_variable` of the C library interface.
    The style of the variable is determined by asking the library; if
    ``vartype`` is given it must match.  Equal-style variables return a
    float, string-style variables a string, and atom-style variables a
    NumPy array with one value per local atom, which is zero for atoms not
    in ``group`` (default "all").  This array is a copy, the memory
    allocated by the C-interface is released.  Vector-style variables
    return a view of the vector data stored in LAMMPS.

    :param name: name of the variable to execute
    :type name: string
    :param vartype: type of variable, see :ref:`py_vartype_constants`
    :type vartype: int
    :param group: name of group for atom-style variable
    :type group: string, only for atom-style variables
    :return: the requested data
    :rtype: float, string, or numpy.array
    """
    self._check_valid()
    actual = self.lib.lammps_extract_variable_datatype(self.lmp, name.encode())
    if actual < 0:
      raise LAMMPSError("Unknown variable '{}'".format(name))
    if vartype is None:
      vartype = actual
    elif vartype != actual:
      raise ValidationError("Variable '{}' is {}-style, not {}-style".format(
        name, _VAR_NAMES.get(actual, actual), _VAR_NAMES.get(vartype, vartype)))

    cname = name.encode()
    cgroup = group.encode() if group else None

    if vartype == LMP_VAR_EQUAL:
      with ExceptionCheck(self):
        ptr = self.lib.lammps_extract_variable(self.lmp,cname,None)
      if not ptr:
        raise LAMMPSError("Could not evaluate variable '{}'".format(name))
      result = cast(ptr, POINTER(c_double))[0]
      self.lib.lammps_free(ptr)
      return result
    elif vartype == LMP_VAR_ATOM:
      nlocal = self.extract_setting("nlocal")
      with ExceptionCheck(self):
        ptr = self.lib.lammps_extract_variable(self.lmp,cname,cgroup)
      if not ptr:
        if nlocal == 0:
          return np.zeros(0)
        raise LAMMPSError("Could not evaluate variable '{}'".format(name))
      result = np.array(views.darray(ptr, nlocal))
      self.lib.lammps_free(ptr)
      return result
    elif vartype == LMP_VAR_VECTOR:
      with ExceptionCheck(self):
        ptr = self.lib.lammps_extract_variable(self.lmp,cname,'LMP_SIZE_VECTOR'.encode())
      if not ptr:
        raise LAMMPSError("Could not evaluate variable '{}'".format(name))
      nvector = cast(ptr, POINTER(c_int))[0]
      self.lib.lammps_free(ptr)
      with ExceptionCheck(self):
        ptr = self.lib.lammps_extract_variable(self.lmp,cname,None)
      # do NOT free the values pointer (points to internal vector data)
      a = views.darray(ptr, nvector)
      if a is None:
        raise LAMMPSError("Could not evaluate variable '{}'".format(name))
      return a
    elif vartype == LMP_VAR_STRING:
      with ExceptionCheck(self):
        ptr = self.lib.lammps_extract_variable(self.lmp,cname,None)
      if not ptr:
        raise LAMMPSError("Could not evaluate variable '{}'".format(name))
      return cast(ptr, c_char_p).value.decode('utf-8')
    raise ValidationError("Unknown variable type {}".format(vartype))

  # -------------------------------------------------------------------------

  def extract_box(self):
    """Extract simulation box parameters

    This is a wrapper around the :cpp:func:`lammps_extract_box` function
    of the C-library interface.

    :return: box parameters
    :rtype: Box
    """
    self._check_valid()
    boxlo = (3*c_double)()
    boxhi = (3*c_double)()
    xy = c_double()
    yz = c_double()
    xz = c_double()
    periodicity = (3*c_int)()
    box_change = c_int()

    with ExceptionCheck(self):
      self.lib.lammps_extract_box(self.lmp,boxlo,boxhi,
                                  byref(xy),byref(yz),byref(xz),
                                  periodicity,byref(box_change))

    return Box(tuple(boxlo[:3]), tuple(boxhi[:3]), xy.value, yz.value, xz.value,
               tuple(periodicity[:3]), box_change.value)

  # -------------------------------------------------------------------------

  def reset_box(self,boxlo,boxhi,xy,yz,xz):
    """Reset simulation box parameters

    This is a wrapper around the :cpp:func:`lammps_reset_box` function
    of the C-library interface.  All arguments are checked before the
    new values are passed to LAMMPS in a single call.

    :param boxlo: new lower box boundaries
    :type boxlo: sequence of 3 floats
    :param boxhi: new upper box boundaries
    :type boxhi: sequence of 3 floats
    :param xy: xy tilt factor
    :type xy: float
    :param yz: yz tilt factor
    :type yz: float
    :param xz: xz tilt factor
    :type xz: float
    """
    self._check_valid()
    if len(boxlo) != 3 or len(boxhi) != 3:
      raise ValidationError("Box boundaries must have 3 elements each")
    cboxlo = (3*c_double)(*[float(v) for v in boxlo])
    cboxhi = (3*c_double)(*[float(v) for v in boxhi])
    xy, yz, xz = float(xy), float(yz), float(xz)

    with ExceptionCheck(self):
      self.lib.lammps_reset_box(self.lmp,cboxlo,cboxhi,xy,yz,xz)

  # -------------------------------------------------------------------------
  # gather and scatter of per-atom data across processes, sorted by atom ID

  def _peratom_cols(self, kind, oid):
    with ExceptionCheck(self):
      if kind == "compute":
        ptr = self.lib.lammps_extract_compute(self.lmp, oid.encode(), LMP_STYLE_ATOM, LMP_SIZE_COLS)
      else:
        ptr = self.lib.lammps_extract_fix(self.lmp, oid.encode(), LMP_STYLE_ATOM, LMP_SIZE_COLS, 0, 0)
    if not ptr:
      raise LAMMPSError("{} '{}' does not provide per-atom data".format(kind.capitalize(), oid))
    return cast(ptr, POINTER(c_int))[0]

  def _gather_descriptor(self, name):
    if name == "mass":
      raise ValidationError("'mass' is a per-type property, use extract_atom('mass') instead")

    if name.startswith("c_") or name.startswith("f_"):
      kind = "compute" if name.startswith("c_") else "fix"
      oid = name[2:]
      if not self.has_id(kind, oid):
        raise LAMMPSError("Unknown {} ID '{}'".format(kind, oid))
      ncols = self._peratom_cols(kind, oid)
      return np.dtype(np.float64), max(ncols, 1)

    dtype = self.extract_atom_datatype(name)
    if dtype is None or dtype < 0:
      raise LAMMPSError("Unknown per-atom property '{}'".format(name))
    count = self._atom_width(name) if views.is_2d(dtype) else 1
    if views.is_integer(dtype):
      return np.dtype(np.int32), count
    return np.dtype(np.float64), count

  def _check_ids(self, ids, natoms):
    ids = np.ascontiguousarray(ids)
    if ids.ndim != 1 or (ids.size and ids.dtype.kind not in 'iu'):
      raise ValidationError("Atom IDs must be a 1d sequence of integers")
    if ids.size and (ids.min() < 1 or ids.max() > natoms):
      raise ValidationError("Atom IDs must be within [1, {}]".format(natoms))
    return ids.astype(np.intc)

  def gather(self, name, dtype, ids=None):
    """Gather per-atom data from all processes, sorted by atom ID

    This is a wrapper around the :cpp:func:`lammps_gather` and
    :cpp:func:`lammps_gather_subset` functions of the C-library interface.
    ``name`` may be a per-atom property like "x" or "type", a custom
    per-atom property, or "c_ID" or "f_ID" for the per-atom data of a
    compute or fix.  Requires ``atom_modify map yes``.

    All checks of the arguments happen before data is requested from LAMMPS:
    ``dtype`` must match the type of the data and all atom IDs must be
    within [1, natoms].

    :param name: name of the per-atom quantity
    :type name:  string
    :param dtype: element type, numpy.int32 or numpy.float64
    :type dtype:  numpy.dtype
    :param ids: 1-based atom IDs to gather, all atoms if None
    :type ids:  sequence of int, optional
    :return: one row per atom, one column per value
    :rtype: numpy.array(natoms or len(ids), count)
    """
    self._check_valid()
    nptype, count = self._gather_descriptor(name)
    dtype = _gather_type(dtype)
    if dtype != nptype:
      raise ValidationError("Per-atom quantity '{}' has element type {}, not {}".format(name, nptype, dtype))

    natoms = self.get_natoms()
    ltype = 1 if dtype == np.float64 else 0
    if ids is None:
      data = np.zeros((natoms, count), dtype=dtype)
      if natoms:
        with ExceptionCheck(self):
          self.lib.lammps_gather(self.lmp,name.encode(),ltype,count,data.ctypes.data_as(c_void_p))
    else:
      ids = self._check_ids(ids, natoms)
      ndata = len(ids)
      data = np.zeros((ndata, count), dtype=dtype)
      if ndata:
        with ExceptionCheck(self):
          self.lib.lammps_gather_subset(self.lmp,name.encode(),ltype,count,ndata,
                                        ids.ctypes.data_as(POINTER(c_int)),
                                        data.ctypes.data_as(c_void_p))
    return data

  def scatter(self, name, data, ids=None):
    """Scatter per-atom data to all processes

    This is a wrapper around the :cpp:func:`lammps_scatter` and
    :cpp:func:`lammps_scatter_subset` functions of the C-library interface
    and the counterpart of :py:meth:`gather`.  ``data`` must have the
    layout returned by :py:meth:`gather`, with one row per atom ID in
    ``ids``, or per atom sorted by ID if ``ids`` is None.  Atoms not
    listed in ``ids`` are left unchanged.

    :param name: name of the per-atom quantity
    :type name:  string
    :param data: values to store
    :type data:  numpy.array of numpy.int32 or numpy.float64
    :param ids: 1-based atom IDs to scatter to, all atoms if None
    :type ids:  sequence of int, optional
    """
    self._check_valid()
    nptype, count = self._gather_descriptor(name)
    data = np.asarray(data)
    dtype = _gather_type(data.dtype)
    if dtype != nptype:
      raise ValidationError("Per-atom quantity '{}' has element type {}, not {}".format(name, nptype, dtype))

    natoms = self.get_natoms()
    if ids is None:
      ndata = natoms
    else:
      ids = self._check_ids(ids, natoms)
      ndata = len(ids)
    if data.shape != (ndata, count):
      raise ValidationError("Data for '{}' must have shape {}, got {}".format(name, (ndata, count), data.shape))
    if not ndata:
      return

    data = np.ascontiguousarray(data)
    ltype = 1 if dtype == np.float64 else 0
    with ExceptionCheck(self):
      if ids is None:
        self.lib.lammps_scatter(self.lmp,name.encode(),ltype,count,data.ctypes.data_as(c_void_p))
      else:
        self.lib.lammps_scatter_subset(self.lmp,name.encode(),ltype,count,ndata,
                                       ids.ctypes.data_as(POINTER(c_int)),
                                       data.ctypes.data_as(c_void_p))

  # -------------------------------------------------------------------------

  def _gather_topology(self, kind, width, funcname):
    self._check_valid()
    if self.extract_setting("molecule_flag") != 1:
      raise LAMMPSError("Atom style does not support {}".format(kind))
    ntotal = int(self.extract_global("n" + kind)[0])
    data = np.zeros((ntotal, width), dtype=views.numpy_dtype(self.c_tagint))
    if ntotal:
      with ExceptionCheck(self):
        getattr(self.lib, funcname)(self.lmp, data.ctypes.data_as(c_void_p))
    return data

  def gather_bonds(self):
    """Retrieve global list of bonds

    This is a wrapper around the :cpp:func:`lammps_gather_bonds`
    function of the C-library interface.  Each row holds the bond type
    followed by the IDs of the two atoms.  Rows are in the order LAMMPS
    stores them.

    :return: the requested data as a 2d-integer numpy array
    :rtype: numpy.array(nbonds,3)
    """
    return self._gather_topology("bonds", 3, "lammps_gather_bonds")

  def gather_angles(self):
    """ Retrieve global list of angles

    This is a wrapper around the :cpp:func:`lammps_gather_angles`
    function of the C-library interface.

    :return: the requested data as a 2d-integer numpy array
    :rtype: numpy.array(nangles,4)
    """
    return self._gather_topology("angles", 4, "lammps_gather_angles")

  def gather_dihedrals(self):
    """ Retrieve global list of dihedrals

    This is a wrapper around the :cpp:func:`lammps_gather_dihedrals`
    function of the C-library interface.

    :return: the requested data as a 2d-integer numpy array
    :rtype: numpy.array(ndihedrals,5)
    """
    return self._gather_topology("dihedrals", 5, "lammps_gather_dihedrals")

  def gather_impropers(self):
    """ Retrieve global list of impropers

    This is a wrapper around the :cpp:func:`lammps_gather_impropers`
    function of the C-library interface.

    :return: the requested data as a 2d-integer numpy array
    :rtype: numpy.array(nimpropers,5)
    """
    return self._gather_topology("impropers", 5, "lammps_gather_impropers")

  # -------------------------------------------------------------------------

  def encode_image_flags(self,ix,iy,iz):
    """ convert 3 integers with image flags for x-, y-, and z-direction
    into a single integer like it is used internally in LAMMPS

    This method is a wrapper around the :cpp:func:`lammps_encode_image_flags`
    function of library interface and uses the integer sizes LAMMPS
    was compiled with.  See :py:func:`lammps_access.encode_image_flags`
    for a version that does not need a LAMMPS instance.

    :return: encoded image flags
    :rtype: int
    """
    self._check_valid()
    return int(self.lib.lammps_encode_image_flags(ix,iy,iz))

  def decode_image_flags(self,image):
    """ Convert encoded image flag integer into three regular integers.

    This method is a wrapper around the :cpp:func:`lammps_decode_image_flags`
    function of library interface.

    :return: image flags in x-, y-, and z- direction
    :rtype: tuple of 3 int
    """
    self._check_valid()
    flags = (c_int*3)()
    self.lib.lammps_decode_image_flags(image,byref(flags))
    return tuple(int(i) for i in flags)

  # -------------------------------------------------------------------------

  def create_atoms(self, x, ids, types, v=None, image=None, bexpand=False):
    """
    Create atoms from arrays of coordinates and properties

    This function is a wrapper around the :cpp:func:`lammps_create_atoms`
    function of the C-library interface.  The number of atoms is taken from
    ``x``, all other arguments must match it; this is checked before
    LAMMPS is called.  Use :py:func:`encode_image_flags` to combine
    three image flags into one integer.

    :param x: coordinates
    :type x: array of shape (n, 3)
    :param ids: atom IDs or None to let LAMMPS assign them
    :type ids: array of n ints
    :param types: atom types
    :type types: array of n ints
    :param v: velocities (optional)
    :type v: array of shape (n, 3)
    :param image: encoded image flags (optional)
    :type image: array of n ints
    :param bexpand: whether to expand shrink-wrap boundaries if atoms are outside the box (optional)
    :type bexpand: bool
    :return: number of atoms created
    :rtype: int
    """
    self._check_valid()
    x = np.ascontiguousarray(x, dtype=np.float64)
    if x.ndim != 2 or x.shape[1] != 3:
      raise ValidationError("Coordinates must have shape (n, 3), got {}".format(x.shape))
    n = x.shape[0]

    def per_atom(values, what, dtype):
      values = np.ascontiguousarray(values, dtype=dtype)
      if values.shape != (n,):
        raise ValidationError("{} must have shape ({},), got {}".format(what, n, values.shape))
      return values

    types = per_atom(types, "Atom types", np.int32)
    if ids is not None:
      ids = per_atom(ids, "Atom IDs", views.numpy_dtype(self.c_tagint))
    if image is not None:
      image = per_atom(image, "Image flags", views.numpy_dtype(self.c_imageint))
    if v is not None:
      v = np.ascontiguousarray(v, dtype=np.float64)
      if v.shape != (n, 3):
        raise ValidationError("Velocities must have shape ({}, 3), got {}".format(n, v.shape))

    def ptr(a):
      return None if a is None else a.ctypes.data_as(c_void_p)

    with ExceptionCheck(self):
      return self.lib.lammps_create_atoms(self.lmp, n, ptr(ids), ptr(types), ptr(x),
                                          ptr(v), ptr(image), 1 if bexpand else 0)

  # -------------------------------------------------------------------------

  def has_id(self, category, name):
    """Returns whether a given ID name is available in a given category

    This is a wrapper around the function :cpp:func:`lammps_has_id`
    of the library interface.

    :param category: name of category
    :type  category: string
    :param name: name of the ID
    :type  name: string

    :return: true if ID is available in given category
    :rtype:  bool
    """
    self._check_valid()
    return self.lib.lammps_has_id(self.lmp, category.encode(), name.encode()) != 0

  # -------------------------------------------------------------------------

  def available_ids(self, category):
    """Returns a list of IDs available for a given category

    This is a wrapper around the functions :cpp:func:`lammps_id_count()`
    and :cpp:func:`lammps_id_name()` of the library interface.

    :param category: name of category, one of "compute", "dump", "fix", "group", "molecule", "region", "variable"
    :type  category: string

    :return: list of id names in given category
    :rtype:  list
    """
    self._check_valid()
    if category not in LMP_ID_CATEGORIES:
      raise ValidationError("Unknown category '{}', must be one of {}".format(category, ", ".join(LMP_ID_CATEGORIES)))

    available_ids = []
    num = self.lib.lammps_id_count(self.lmp, category.encode())
    sb = create_string_buffer(256)
    for idx in range(num):
      self.lib.lammps_id_name(self.lmp, category.encode(), idx, sb, 256)
      available_ids.append(sb.value.decode())
    return available_ids

  # -------------------------------------------------------------------------

  def group_to_atom_ids(self, group):
    """Return the IDs of all atoms in a group

    Membership is evaluated by LAMMPS through a temporary per-atom compute
    on the group, which is removed again before returning.  Requires
    ``atom_modify map yes``.

    :param group: name of the group
    :type  group: string
    :return: sorted 1-based atom IDs
    :rtype:  numpy.array
    """
    if group not in self.available_ids("group"):
      raise LAMMPSError("Unknown group '{}'".format(group))

    cid = "lammps_access_group_ids"
    self.command("compute {} {} property/atom id".format(cid, group))
    try:
      ids = self.gather("c_" + cid, np.float64)[:, 0]
    finally:
      self.command("uncompute " + cid)
    # atoms outside the group report 0
    return ids[ids != 0].astype(views.numpy_dtype(self.c_tagint))

  # -------------------------------------------------------------------------

  def set_fix_external_callback(self, fix_id, callback, caller=None):
    """Set the callback function for a fix external instance with a given fix ID.

    Optionally also set a reference to the calling object.

    This is a wrapper around the :cpp:func:`lammps_set_fix_external_callback` function
    of the C-library interface.  However this is set up to call a Python function with
    the following arguments.

    .. code-block: python

       def func(object, ntimestep, nlocal, tag, x, f):

    - object is the value of the "caller" argument
    - ntimestep is the current timestep
    - nlocal is the number of local atoms on the current MPI process
    - tag is a 1d NumPy array of integers representing the atom IDs of the local atoms
    - x is a 2d NumPy array of doubles of the coordinates of the local atoms
    - f is a 2d NumPy array of doubles of the forces on the local atoms that will be added

    :param fix_id:  Fix-ID of a fix external instance
    :type: string
    :param callback: Python function that will be called from fix external
    :type: function
    :param caller: reference to some object passed to the callback function
    :type: object, optional
    """
    self._check_valid()

    def callback_wrapper(caller, ntimestep, nlocal, tag_ptr, x_ptr, fext_ptr):
      tag = views.iarray(self.c_tagint, tag_ptr, nlocal)
      x   = views.darray(x_ptr, nlocal, 3)
      f   = views.darray(fext_ptr, nlocal, 3)
      callback(caller, ntimestep, nlocal, tag, x, f)

    cFunc   = self.FIX_EXTERNAL_CALLBACK_FUNC(callback_wrapper)
    cCaller = caller

    self.callback[fix_id] = { 'function': cFunc, 'caller': caller }
    with ExceptionCheck(self):
      self.lib.lammps_set_fix_external_callback(self.lmp, fix_id.encode(), cFunc, cCaller)

  def fix_external(self, fix_id, group, ncall, napply, callback, caller=None):
    """Define a fix external instance in callback mode and register its callback

    Equivalent to the command ``fix <fix_id> <group> external pf/callback <ncall> <napply>``
    followed by :py:meth:`set_fix_external_callback`.  The callback receives
    this object as first argument unless ``caller`` is given.

    :param fix_id: ID of the new fix
    :type  fix_id: string
    :param group: group of atoms the fix is applied to
    :type  group: string
    :param ncall: invoke the callback every ncall steps
    :type  ncall: int
    :param napply: apply the forces every napply steps
    :type  napply: int
    :param callback: Python function that will be called from fix external
    :type  callback: function
    """
    self.command("fix {} {} external pf/callback {} {}".format(fix_id, group, ncall, napply))
    self.set_fix_external_callback(fix_id, callback, self if caller is None else caller)

  def fix_external_set_energy_global(self, fix_id, eng):
    """Set the global energy contribution for a fix external instance with the given ID.

    :param fix_id:  Fix-ID of a fix external instance
    :type: string
    :param eng:     potential energy value to be added by fix external
    :type: float
    """
    self._check_valid()
    with ExceptionCheck(self):
      return self.lib.lammps_fix_external_set_energy_global(self.lmp, fix_id.encode(), eng)

  def fix_external_set_virial_global(self, fix_id, virial):
    """Set the global virial contribution for a fix external instance with the given ID.

    :param fix_id:  Fix-ID of a fix external instance
    :type: string
    :param virial:  list of 6 floating point numbers with the virial to be added by fix external
    :type: float
    """
    self._check_valid()
    if len(virial) != 6:
      raise ValidationError("Global virial must have 6 elements")
    cvirial = (6*c_double)(*virial)
    with ExceptionCheck(self):
      return self.lib.lammps_fix_external_set_virial_global(self.lmp, fix_id.encode(), cvirial)

  def fix_external_set_vector_length(self, fix_id, length):
    """Set the vector length for a global vector stored with fix external for analysis

    :param fix_id:  Fix-ID of a fix external instance
    :type: string
    :param length:  length of the global vector
    :type: int
    """
    self._check_valid()
    with ExceptionCheck(self):
      return self.lib.lammps_fix_external_set_vector_length(self.lmp, fix_id.encode(), length)

  def fix_external_set_vector(self, fix_id, idx, val):
    """Store a global vector value for a fix external instance with the given ID.

    :param fix_id:  Fix-ID of a fix external instance
    :type: string
    :param idx:     1-based index of the value in the global vector
    :type: int
    :param val:     value to be stored in the global vector
    :type: float
    """
    self._check_valid()
    with ExceptionCheck(self):
      return self.lib.lammps_fix_external_set_vector(self.lmp, fix_id.encode(), idx, val)

  # -------------------------------------------------------------------------

  def get_neighlist(self, idx):
    """Returns an instance of :class:`NeighList` which wraps access to the neighbor list with the given index

    :param idx: index of neighbor list
    :type  idx: int
    :return: an instance of :class:`NeighList` wrapping access to neighbor list data
    :rtype:  NeighList
    """
    self._check_valid()
    if idx < 0:
      raise KeyError("Invalid neighbor list index {}".format(idx))
    return NeighList(self, idx)

  def get_neighlist_size(self, idx):
    """Return the number of elements in neighbor list with the given index

    :param idx: neighbor list index
    :type  idx: int
    :return: number of elements in neighbor list with index idx
    :rtype:  int
     """
    self._check_valid()
    return self.lib.lammps_neighlist_num_elements(self.lmp, idx)

  def get_neighlist_element_neighbors(self, idx, element):
    """Return data of neighbor list entry

    :param idx: neighbor list index
    :type  idx: int
    :param element: neighbor list element index
    :type  element: int
    :return: tuple with atom local index and numpy array of neighbor local atom indices
    :rtype:  (int, numpy.array)
    """
    self._check_valid()
    c_iatom = c_int()
    c_numneigh = c_int()
    c_neighbors = POINTER(c_int)()
    self.lib.lammps_neighlist_element_neighbors(self.lmp, idx, element, byref(c_iatom), byref(c_numneigh), byref(c_neighbors))
    if c_iatom.value < 0:
      raise IndexError("neighbor list index out of range")
    neighbors = views.iarray(c_int32, c_neighbors, c_numneigh.value)
    return c_iatom.value, neighbors

  # -------------------------------------------------------------------------

  def find_pair_neighlist(self, style, exact=True, nsub=0, reqid=0):
    """Find neighbor list index of pair style neighbor list

    Search for a neighbor list requested by a pair style instance that
    matches "style".  If exact is True, the pair style name must match
    exactly. If exact is False, the pair style name is matched against
    "style" as regular expression or sub-string. If the pair style is a
    hybrid pair style, the style is instead matched against the hybrid
    sub-styles. If the same pair style is used as sub-style multiple
    types, you must set nsub to a value n > 0 which indicates the nth
    instance of that sub-style to be used (same as for the pair_coeff
    command). The default value of 0 will fail to match in that case.

    Once the pair style instance has been identified, it may have
    requested multiple neighbor lists. Those are uniquely identified by
    a request ID > 0 as set by the pair style. Otherwise the request
    ID is 0.

    :param style: name of pair style that should be searched for
    :type  style: string
    :param exact: controls whether style should match exactly or only must be contained in pair style name, defaults to True
    :type  exact: bool, optional
    :param nsub:  match nsub-th hybrid sub-style, defaults to 0
    :type  nsub:  int, optional
    :param reqid: list request id, > 0 in case there are more than one, defaults to 0
    :type  reqid:   int, optional
    :return: neighbor list index if found, otherwise -1
    :rtype:  int
    """
    self._check_valid()
    return self.lib.lammps_find_pair_neighlist(self.lmp, style.encode(), int(exact), nsub, reqid)

  def find_fix_neighlist(self, fixid, reqid=0):
    """Find neighbor list index of fix neighbor list

    :param fixid: name of fix
    :type  fixid: string
    :param reqid:   id of neighbor list request, in case there are more than one request, defaults to 0
    :type  reqid:   int, optional
    :return: neighbor list index if found, otherwise -1
    :rtype:  int
    """
    self._check_valid()
    return self.lib.lammps_find_fix_neighlist(self.lmp, fixid.encode(), reqid)

  def find_compute_neighlist(self, computeid, reqid=0):
    """Find neighbor list index of compute neighbor list

    :param computeid: name of compute
    :type  computeid: string
    :param reqid:   index of neighbor list request, in case there are more than one request, defaults to 0
    :type  reqid:   int, optional
    :return: neighbor list index if found, otherwise -1
    :rtype:  int
    """
    self._check_valid()
    return self.lib.lammps_find_compute_neighlist(self.lmp, computeid.encode(), reqid)

  # -------------------------------------------------------------------------

  def _neighlist(self, idx, what):
    if idx < 0:
      raise KeyError("Could not find neighbor list for {}".format(what))
    logger.debug("using neighbor list %d of %s", idx, what)
    return NeighList(self, idx)

  def pair_neighborlist(self, style, exact=True, nsub=0, reqid=0):
    """Access the neighbor list requested by a pair style

    See :py:meth:`find_pair_neighlist` for the meaning of the arguments.

    :return: neighbor list
    :rtype:  NeighList
    :raises KeyError: if no matching neighbor list exists
    """
    idx = self.find_pair_neighlist(style, exact, nsub, reqid)
    return self._neighlist(idx, "pair style '{}'".format(style))

  def fix_neighborlist(self, fixid, reqid=0):
    """Access the neighbor list requested by a fix

    :return: neighbor list
    :rtype:  NeighList
    :raises KeyError: if no matching neighbor list exists
    """
    idx = self.find_fix_neighlist(fixid, reqid)
    return self._neighlist(idx, "fix '{}'".format(fixid))

  def compute_neighborlist(self, computeid, reqid=0):
    """Access the neighbor list requested by a compute

    :return: neighbor list
    :rtype:  NeighList
    :raises KeyError: if no matching neighbor list exists
    """
    idx = self.find_compute_neighlist(computeid, reqid)
    return self._neighlist(idx, "compute '{}'".format(computeid))
