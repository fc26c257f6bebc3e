import os,unittest
import numpy as np
from lammps_access import LMP, LAMMPS_DOUBLE_2D, LAMMPSError, ValidationError

has_lammps=False
try:
    lmp=LMP(cmdargs=['-nocite', '-log','none', '-screen','none'])
    has_lammps=True
    lmp.close()
except Exception:
    pass

test_files=os.path.join(os.path.dirname(os.path.abspath(__file__)), "test_files")

@unittest.skipIf(not has_lammps, "LAMMPS shared library is not available")
class PythonGather(unittest.TestCase):
    def setUp(self):
        self.lmp=LMP(cmdargs=['-nocite', '-log','none', '-screen','none'])
        self.lmp.file(os.path.join(test_files, "in.simple"))
        self.lmp.commands_string("""compute pos all property/atom x y z
                                    fix pos all ave/atom 10 1 10 c_pos[1] c_pos[2] c_pos[3]
                                    run 10""")

    def tearDown(self):
        # verify that no errors were missed
        self.assertEqual(self.lmp.lib.lammps_has_error(self.lmp.lmp),0)
        self.lmp.close()
        del self.lmp

    def testGatherErrors(self):
        with self.assertRaises(ValidationError):
            self.lmp.gather("x", np.int32)
        with self.assertRaises(ValidationError):
            self.lmp.gather("id", np.float64)
        with self.assertRaises(ValidationError):
            self.lmp.gather("x", np.float32)
        with self.assertRaises(ValidationError):
            self.lmp.gather("mass", np.float64)

        with self.assertRaises(LAMMPSError):
            self.lmp.gather("nonsense", np.float64)
        with self.assertRaises(LAMMPSError):
            self.lmp.gather("c_nonsense", np.float64)
        with self.assertRaises(LAMMPSError):
            self.lmp.gather("f_nonsense", np.float64)

        with self.assertRaises(ValidationError):
            self.lmp.gather("x", np.float64, [28])
        with self.assertRaises(ValidationError):
            self.lmp.gather("x", np.float64, [0])

    def testScatterErrors(self):
        data=np.zeros((27,3))
        with self.assertRaises(LAMMPSError):
            self.lmp.scatter("nonsense", data)
        with self.assertRaises(LAMMPSError):
            self.lmp.scatter("c_nonsense", data)
        with self.assertRaises(LAMMPSError):
            self.lmp.scatter("f_nonsense", data)

        bad_data=np.ones((1,3))
        with self.assertRaises(ValidationError):
            self.lmp.scatter("x", bad_data, [28])
        with self.assertRaises(ValidationError):
            self.lmp.scatter("x", bad_data, [0])
        with self.assertRaises(ValidationError):
            self.lmp.scatter("x", np.ones((26,3)))
        with self.assertRaises(ValidationError):
            self.lmp.scatter("x", np.ones((27,3), dtype=np.int32))

    def testGather(self):
        x=self.lmp.gather("x", np.float64)
        self.assertEqual(x.shape,(27,3))
        np.testing.assert_array_equal(x,self.lmp.gather("c_pos", np.float64))
        np.testing.assert_array_equal(x,self.lmp.gather("f_pos", np.float64))

        ids=self.lmp.gather("id", np.int32)
        self.assertEqual(ids.shape,(27,1))
        np.testing.assert_array_equal(ids[:,0],np.arange(1,28))

    def testGatherSubset(self):
        subset=[2,5,10,5]
        rows=np.array(subset)-1
        for name in ("x","c_pos","f_pos"):
            np.testing.assert_array_equal(self.lmp.gather(name, np.float64)[rows],
                                          self.lmp.gather(name, np.float64, subset))
        self.assertEqual(self.lmp.gather("x", np.float64, []).shape,(0,3))

    def testScatter(self):
        data=np.zeros((27,3))
        self.lmp.scatter("x", data)
        np.testing.assert_array_equal(self.lmp.gather("x", np.float64),data)

        subset=[2,5,10]
        data_subset=np.ones((3,3))
        self.lmp.scatter("x", data_subset, subset)
        np.testing.assert_array_equal(self.lmp.gather("x", np.float64, subset),data_subset)
        # atoms outside the subset are unchanged
        np.testing.assert_array_equal(self.lmp.gather("x", np.float64, [1,3]),np.zeros((2,3)))

    def testScatterComputeFix(self):
        data=np.zeros((27,3))
        for name in ("x","f_pos","c_pos"):
            self.lmp.scatter(name, data)
        for name in ("x","f_pos","c_pos"):
            np.testing.assert_array_equal(self.lmp.gather(name, np.float64),data)

        subset=[2,5,10,5]
        data_subset=np.ones((4,3))
        for name in ("x","f_pos","c_pos"):
            self.lmp.scatter(name, data_subset, subset)
        for name in ("x","f_pos","c_pos"):
            np.testing.assert_array_equal(self.lmp.gather(name, np.float64, subset),data_subset)
            np.testing.assert_array_equal(self.lmp.gather(name, np.float64, [1,3]),np.zeros((2,3)))

    def testScatterIntegers(self):
        self.lmp.scatter("image", np.zeros((27,1), dtype=np.int32))
        self.assertTrue(np.all(self.lmp.gather("image", np.int32) == 0))

@unittest.skipIf(not has_lammps, "LAMMPS shared library is not available")
class PythonTopology(unittest.TestCase):
    def setUp(self):
        self.lmp=LMP(cmdargs=['-nocite', '-log','none', '-screen','none'])

    def tearDown(self):
        self.lmp.close()
        del self.lmp

    def testGatherTopology(self):
        self.lmp.command("atom_style molecular")
        self.lmp.command("read_data " + os.path.join(test_files, "bonds_angles_dihedrals_impropers.data"))

        np.testing.assert_array_equal(self.lmp.gather_bonds(),
                                      [[1,1,2],[1,2,3],[1,3,4],[1,4,1]])
        np.testing.assert_array_equal(self.lmp.gather_angles(),
                                      [[1,1,2,3],[1,2,3,4]])
        np.testing.assert_array_equal(self.lmp.gather_dihedrals(),
                                      [[1,1,2,3,4]])
        np.testing.assert_array_equal(self.lmp.gather_impropers(),
                                      [[1,4,3,2,1]])
        self.assertEqual(self.lmp.lib.lammps_has_error(self.lmp.lmp),0)

    def testGatherTopologyAtomic(self):
        self.lmp.file(os.path.join(test_files, "in.simple"))
        with self.assertRaises(LAMMPSError):
            self.lmp.gather_bonds()

@unittest.skipIf(not has_lammps, "LAMMPS shared library is not available")
class PythonUtilities(unittest.TestCase):
    def setUp(self):
        self.lmp=LMP(cmdargs=['-nocite', '-log','none', '-screen','none'])

    def tearDown(self):
        self.lmp.close()
        del self.lmp

    def testGroups(self):
        self.lmp.commands_string("""atom_modify map yes
                                    region cell block 0 2 0 2 0 2
                                    create_box 1 cell
                                    lattice sc 1
                                    create_atoms 1 region cell
                                    mass 1 1
                                    group a id 1 2 3 5 8
                                    group even id 2 4 6 8
                                    group odd id 1 3 5 7""")

        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("all"),np.arange(1,9))
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("a"),[1,2,3,5,8])
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("even"),[2,4,6,8])
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("odd"),[1,3,5,7])
        with self.assertRaises(LAMMPSError):
            self.lmp.group_to_atom_ids("nonsense")

        self.lmp.command(["compute pos all property/atom x y z",
                          "fix 1 all ave/atom 10 1 10 c_pos[*]",
                          "run 10"])

        self.assertEqual(self.lmp.available_ids("group"),["all","a","even","odd"])
        self.assertEqual(self.lmp.available_ids("compute"),["thermo_temp","thermo_press","thermo_pe","pos"])
        self.assertEqual(self.lmp.available_ids("fix"),["1"])
        self.assertTrue(self.lmp.has_id("compute","pos"))
        self.assertFalse(self.lmp.has_id("fix","pos"))
        with self.assertRaises(ValidationError):
            self.lmp.available_ids("nonsense")

        self.assertEqual(self.lmp.lib.lammps_has_error(self.lmp.lmp),0)

    def testManyGroups(self):
        self.lmp.commands_string("""atom_modify map yes
                                    region cell block 0 2 0 2 0 2
                                    create_box 1 cell
                                    lattice sc 1
                                    create_atoms 1 region cell
                                    mass 1 1""")
        # LAMMPS allows 32 groups including "all"
        for i in range(1,32):
            self.lmp.command("group g{} id {}".format(i, i % 8 + 1))
        self.assertEqual(len(self.lmp.available_ids("group")),32)
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("g31"),[8])
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("g7"),[8])
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("g1"),[2])

    def testDeletedGroup(self):
        self.lmp.commands_string("""atom_modify map yes
                                    region cell block 0 2 0 2 0 2
                                    create_box 1 cell
                                    lattice sc 1
                                    create_atoms 1 region cell
                                    mass 1 1
                                    group a id 1 2
                                    group b id 3 4
                                    group c id 5 6
                                    group a delete""")
        self.assertEqual(self.lmp.available_ids("group"),["all","b","c"])
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("b"),[3,4])
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("c"),[5,6])
        with self.assertRaises(LAMMPSError):
            self.lmp.group_to_atom_ids("a")

        # a new group takes over the bit of the deleted one
        self.lmp.command("group d id 7 8")
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("d"),[7,8])
        np.testing.assert_array_equal(self.lmp.group_to_atom_ids("b"),[3,4])
        self.assertFalse(self.lmp.has_id("compute","lammps_access_group_ids"))
        self.assertEqual(self.lmp.lib.lammps_has_error(self.lmp.lmp),0)

    def testCreateAtoms(self):
        setup="""atom_modify map yes
                 region cell block 0 2 0 2 0 2
                 create_box 1 cell
                 lattice sc 1"""
        self.lmp.commands_string(setup)

        rng=np.random.default_rng(42)
        x=rng.random((100,3))
        ids=np.arange(1,101, dtype=np.int32)
        types=np.ones(100, dtype=np.int32)
        image=np.full(100, self.lmp.encode_image_flags(0,0,0), dtype=np.int32)
        v=rng.random((100,3))

        self.assertEqual(self.lmp.create_atoms(x, ids, types, v=v, image=image, bexpand=True),100)
        # atoms were not sorted or migrated, so the order is unchanged
        np.testing.assert_array_equal(x,self.lmp.extract_atom("x", LAMMPS_DOUBLE_2D))
        np.testing.assert_array_equal(v,self.lmp.extract_atom("v", LAMMPS_DOUBLE_2D))

        self.lmp.command("clear")
        self.lmp.commands_string(setup)
        self.lmp.create_atoms(x, ids, types, bexpand=True)
        np.testing.assert_array_equal(np.zeros((100,3)),self.lmp.extract_atom("v", LAMMPS_DOUBLE_2D))

        with self.assertRaises(ValidationError):
            self.lmp.create_atoms(x[:,:2], ids, types, v=v, image=image, bexpand=True)
        with self.assertRaises(ValidationError):
            self.lmp.create_atoms(x, ids[:99], types, v=v, image=image, bexpand=True)
        with self.assertRaises(ValidationError):
            self.lmp.create_atoms(x, ids, types[:99], v=v, image=image, bexpand=True)
        with self.assertRaises(ValidationError):
            self.lmp.create_atoms(x, ids, types, v=v[:2], image=image, bexpand=True)
        with self.assertRaises(ValidationError):
            self.lmp.create_atoms(x, ids, types, v=v, image=image[:99], bexpand=True)
        self.assertEqual(self.lmp.get_natoms(),100)

    def testImageFlags(self):
        self.assertEqual(self.lmp.encode_image_flags(0,0,0),537395712)
        self.assertEqual(self.lmp.decode_image_flags(537395712),(0,0,0))
        self.assertEqual(self.lmp.decode_image_flags(self.lmp.encode_image_flags(1,-2,3)),(1,-2,3))

if __name__ == "__main__":
    unittest.main()
