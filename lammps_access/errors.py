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

INVALID_HANDLE_MESSAGE = ("The LMP object doesn't point to a valid LAMMPS instance! "
                          "This is usually caused by calling `close` or through "
                          "serialization and deserialization.")

# -------------------------------------------------------------------------

class LAMMPSError(Exception):
  """Error reported by the LAMMPS library or raised for a name LAMMPS could not resolve"""
  def __init__(self, message):
    super(LAMMPSError, self).__init__(message)
    self.message = message

  def __str__(self):
    return self.message

# -------------------------------------------------------------------------

class MPIAbortException(LAMMPSError):
  """Error that occurred on a single MPI rank only; LAMMPS will abort"""
  pass

# -------------------------------------------------------------------------

class ValidationError(ValueError):
  """Arguments rejected by the wrapper before any call into LAMMPS"""
  pass

# -------------------------------------------------------------------------

class InvalidHandleError(RuntimeError):
  """Use of an :py:class:`LMP` object after it was closed or deserialized"""
  def __init__(self, message=INVALID_HANDLE_MESSAGE):
    super(InvalidHandleError, self).__init__(message)
