import os,unittest,warnings
from ctypes import RTLD_GLOBAL
from unittest import mock
from lammps_access import library

class PythonLibrary(unittest.TestCase):
    def setUp(self):
        self.saved=(library._library_path, library._library)

    def tearDown(self):
        library._library_path, library._library = self.saved

    def testLocateFromEnvironment(self):
        with mock.patch.dict(os.environ, {"LAMMPS_SHARED_LIB": "/opt/lammps/lib/liblammps.so"}):
            self.assertEqual(library.locate(),"/opt/lammps/lib/liblammps.so")

    def testLocateDefault(self):
        with mock.patch.dict(os.environ):
            os.environ.pop("LAMMPS_SHARED_LIB", None)
            self.assertIn("lammps", os.path.basename(library.locate()))
            self.assertIn("lammps_mpi", os.path.basename(library.locate("mpi")))

    def testSetBeforeLoad(self):
        library._library=None
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            library.set_library("/opt/lammps/lib/liblammps.so")
        self.assertEqual(library.get_library(),"/opt/lammps/lib/liblammps.so")
        self.assertFalse(library.is_loaded())

    def testSetAfterLoad(self):
        library._library=mock.MagicMock()
        with self.assertWarnsRegex(UserWarning, "LAMMPS library path changed, you will need to restart Python"):
            library.set_library(library.locate())
        self.assertTrue(library.is_loaded())

    def testLoadOnce(self):
        library._library=None
        library._library_path="/opt/lammps/lib/liblammps.so"
        with mock.patch("lammps_access.library.CDLL") as cdll:
            lib1=library.load()
            lib2=library.load()
        self.assertIs(lib1,lib2)
        cdll.assert_called_once_with("/opt/lammps/lib/liblammps.so", RTLD_GLOBAL)
        self.assertTrue(library.is_loaded())

if __name__ == "__main__":
    unittest.main()
