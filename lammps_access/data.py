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
# LAMMPS data structures
################################################################################

from collections import namedtuple

from .constants import IMGBITS, IMG2BITS, IMGMASK, IMGMAX
from .errors import ValidationError

Box = namedtuple('Box', ['boxlo', 'boxhi', 'xy', 'yz', 'xz', 'pflags', 'boxflag'])
Box.__doc__ = """Simulation box parameters as returned by :py:meth:`LMP.extract_box`

:ivar boxlo: lower box bounds (xlo, ylo, zlo)
:ivar boxhi: upper box bounds (xhi, yhi, zhi)
:ivar xy: tilt factor
:ivar yz: tilt factor
:ivar xz: tilt factor
:ivar pflags: periodicity flags per dimension (1 = periodic)
:ivar boxflag: 1 if the box dimensions change during a run, 0 otherwise
"""

# -------------------------------------------------------------------------

class NeighList(object):
    """This is a wrapper class that exposes the contents of a neighbor list.

    It can be used like a regular Python list. Each element is a tuple of:

    * the atom local index (0-based, as in the arrays from :py:meth:`LMP.extract_atom`)
    * a NumPy array containing the local atom indices of its neighbors

    Unlike atom IDs, which start at 1, local indices start at 0 so that they
    can index the NumPy arrays directly.  Add 1 when comparing them with
    1-based local index conventions.

    Local indices at or above ``nlocal`` refer to ghost atoms, use
    ``extract_atom(..., with_ghosts=True)`` to look up their properties.

    The neighbor arrays point directly into LAMMPS memory and become invalid
    when the neighbor lists are rebuilt (i.e. during the next ``run``).
    Nothing is copied until an element is accessed.

    :param lmp: reference to instance of :py:class:`LMP`
    :type  lmp: LMP
    :param idx: neighbor list index
    :type  idx: int
    """
    def __init__(self, lmp, idx):
        self.lmp = lmp
        self.idx = idx

    def __str__(self):
        return "Neighbor List ({} atoms)".format(self.size)

    def __repr__(self):
        return self.__str__()

    @property
    def size(self):
        """
        :return: number of elements in neighbor list
        """
        return self.lmp.get_neighlist_size(self.idx)

    def get(self, element):
        """
        Access a specific neighbor list entry. "element" must be a number from 0 to the size-1 of the list

        :return: tuple with atom local index and numpy array of neighbor local atom indices
        :rtype:  (int, numpy.array)
        """
        return self.lmp.get_neighlist_element_neighbors(self.idx, element)

    # the methods below implement the sequence interface, so NeighList can be used like a regular Python list

    def __getitem__(self, element):
        inum = self.size
        if element < 0:
            element += inum
        if element < 0 or element >= inum:
            raise IndexError("neighbor list index out of range")
        return self.get(element)

    def __len__(self):
        return self.size

    def __iter__(self):
        inum = self.size

        for ii in range(inum):
            yield self.get(ii)

    def find(self, iatom):
        """
        Find the neighbor list for a specific (local) atom iatom.
        If there is no list for iatom, None is returned.

        :return: numpy array of neighbor local atom indices
        :rtype:  numpy.array or None
        """
        for idx, neighbors in self:
            if idx == iatom:
                return neighbors
        return None

# -------------------------------------------------------------------------

def encode_image_flags(ix, iy=None, iz=None):
    """Combine three image flags into a single integer like LAMMPS does internally

    This uses the default layout of a 32-bit ``imageint`` with 10 bits per
    direction, so each flag must be within [-512, 511].  The flags may also
    be given as one tuple.  Image flags of zero are encoded as 537395712.

    :return: encoded image flags
    :rtype: int
    """
    if iy is None and iz is None:
        ix, iy, iz = ix
    flags = (int(ix), int(iy), int(iz))
    for flag in flags:
        if flag < -IMGMAX or flag >= IMGMAX:
            raise ValidationError("Image flag {} outside of range [{}, {}]".format(flag, -IMGMAX, IMGMAX - 1))
    ix, iy, iz = flags
    return (((iz + IMGMAX) & IMGMASK) << IMG2BITS) | \
           (((iy + IMGMAX) & IMGMASK) << IMGBITS) | \
           ((ix + IMGMAX) & IMGMASK)

def decode_image_flags(image):
    """Split an encoded image flag integer into its x-, y-, and z-direction flags

    :return: image flags in x-, y-, and z-direction
    :rtype: tuple of 3 int
    """
    image = int(image)
    if image < 0 or image >= (1 << (IMG2BITS + IMGBITS)):
        raise ValidationError("Encoded image flags {} outside of valid range".format(image))
    return ((image & IMGMASK) - IMGMAX,
            (image >> IMGBITS & IMGMASK) - IMGMAX,
            (image >> IMG2BITS) - IMGMAX)
