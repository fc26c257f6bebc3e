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

################################################################################
# NumPy views of memory owned by LAMMPS
#
# The arrays created here do not own their data.  They stay valid only
# until the next command that may reallocate the underlying storage in
# LAMMPS (e.g. creating or deleting atoms, a neighbor list rebuild, or
# closing the instance).  Copy them with numpy.array() to keep the data.
################################################################################

from collections import namedtuple
from ctypes import POINTER, c_double, c_int32, c_int64, cast

import numpy as np

from .constants import *                # lgtm [py/polluting-import]
from .errors import ValidationError

# -------------------------------------------------------------------------

Descriptor = namedtuple('Descriptor', ['dtype', 'rank', 'width', 'rows', 'offset'])
Descriptor.__doc__ = """Resolved layout of a quantity stored inside LAMMPS

:ivar dtype: LAMMPS data type constant (see :ref:`py_datatype_constants`)
:ivar rank: 1 for vectors, 2 for per-row arrays
:ivar width: number of columns for rank 2, otherwise 1
:ivar rows: number of rows exposed in the view
:ivar offset: number of leading elements to skip
"""

_CTYPES = {
  LAMMPS_INT:       c_int32,
  LAMMPS_INT_2D:    c_int32,
  LAMMPS_DOUBLE:    c_double,
  LAMMPS_DOUBLE_2D: c_double,
  LAMMPS_INT64:     c_int64,
  LAMMPS_INT64_2D:  c_int64,
}

# -------------------------------------------------------------------------

def is_2d(dtype):
  return dtype in (LAMMPS_INT_2D, LAMMPS_DOUBLE_2D, LAMMPS_INT64_2D)

def is_integer(dtype):
  return dtype in (LAMMPS_INT, LAMMPS_INT_2D, LAMMPS_INT64, LAMMPS_INT64_2D)

def ctype_of(dtype):
  return _CTYPES[dtype]

def numpy_dtype(c_type):
  if c_type == c_double:
    return np.float64
  elif c_type == c_int64:
    return np.int64
  return np.int32

# -------------------------------------------------------------------------

def empty(c_type, nelem, dim=1, rank=None):
  if rank is None:
    rank = 2 if dim > 1 else 1
  if rank == 2:
    return np.empty((nelem, dim), dtype=numpy_dtype(c_type))
  return np.empty(nelem, dtype=numpy_dtype(c_type))

# -------------------------------------------------------------------------

def iarray(c_int_type, raw_ptr, nelem, dim=1, offset=0):
  """Integer view of a LAMMPS vector (``dim == 1``) or per-row array"""
  return _as_array(c_int_type, raw_ptr, nelem, dim, offset)

def darray(raw_ptr, nelem, dim=1, offset=0):
  """Double precision view of a LAMMPS vector (``dim == 1``) or per-row array"""
  return _as_array(c_double, raw_ptr, nelem, dim, offset)

def _as_array(c_type, raw_ptr, nelem, dim, offset, rank=None):
  if rank is None:
    rank = 2 if dim > 1 else 1
  if nelem < 0 or dim < 1:
    raise ValidationError("Invalid view shape ({}, {})".format(nelem, dim))
  if nelem == 0:
    return empty(c_type, 0, dim, rank)
  if not raw_ptr:
    return None

  if rank == 1:
    ptr = cast(raw_ptr, POINTER(c_type * (nelem + offset)))
  else:
    # 2d arrays in LAMMPS are a vector of row pointers into one contiguous block
    rows = cast(raw_ptr, POINTER(POINTER(c_type)))
    if not rows[0]:
      return None
    ptr = cast(rows[0], POINTER(c_type * ((nelem + offset) * dim)))

  a = np.frombuffer(ptr.contents, dtype=numpy_dtype(c_type))

  if rank == 2:
    a.shape = (nelem + offset, dim)
  else:
    a.shape = (nelem + offset)
  return a[offset:]

# -------------------------------------------------------------------------

def view(raw_ptr, desc):
  """Create a view for a resolved :py:class:`Descriptor`"""
  c_type = ctype_of(desc.dtype)
  return _as_array(c_type, raw_ptr, desc.rows, desc.width, desc.offset, desc.rank)
