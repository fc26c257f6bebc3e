import unittest
import numpy as np
from lammps_access import LMP, LMP_STYLE_GLOBAL, LMP_TYPE_VECTOR

has_lammps=False
try:
    lmp=LMP(cmdargs=['-nocite', '-log','none', '-screen','none'])
    has_lammps=True
    lmp.close()
except Exception:
    pass

# add timestep dependent force
def callback_one(lmp, ntimestep, nlocal, tag, x, f):
    lmp.fix_external_set_virial_global("ext",[1.0, 1.0, 1.0, 0.0, 0.0, 0.0])
    f[:,:]=float(ntimestep)
    if ntimestep < 10:
        lmp.fix_external_set_energy_global("ext", 0.5)
        lmp.fix_external_set_vector("ext", 1, ntimestep)
        lmp.fix_external_set_vector("ext", 3, 1.0)
        lmp.fix_external_set_vector("ext", 4, -0.25)
    else:
        lmp.fix_external_set_energy_global("ext", 1.0)
        lmp.fix_external_set_vector("ext", 2, ntimestep)
        lmp.fix_external_set_vector("ext", 5, -1.0)
        lmp.fix_external_set_vector("ext", 6, 0.25)

    # ------------------------------------------------------------------------

@unittest.skipIf(not has_lammps, "LAMMPS shared library is not available")
class PythonExternal(unittest.TestCase):
    def testExternalCallback(self):
        """Test fix external from Python with pf/callback"""

        lmp=LMP(cmdargs=['-nocite', '-log','none', '-screen','none'])

        # a few commands to set up simple system
        basic_system="""lattice sc 1.0
                        region box block -1 1 -1 1 -1 1
                        create_box 1 box
                        create_atoms 1 box
                        mass 1 1.0
                        pair_style zero 0.1
                        pair_coeff 1 1
                        velocity all set 0.1 0.0 -0.1
                        thermo 5
                        fix 1 all nve"""
        lmp.commands_string(basic_system)
        lmp.fix_external("ext", "all", 5, 1, callback_one)
        lmp.command("fix_modify ext energy yes virial yes")
        lmp.fix_external_set_vector_length("ext", 6)
        lmp.command("run 10 post no")

        val=0.0
        for i in range(0,6):
            val += lmp.extract_fix("ext",LMP_STYLE_GLOBAL,LMP_TYPE_VECTOR,nrow=i)
        self.assertAlmostEqual(val,15.0,14)
        f=lmp.extract_atom("f")
        self.assertTrue(np.all(f == 10.0))
        lmp.close()

    def testCallbackCalled(self):
        """The callback receives the caller and atom data of all local atoms"""

        calls=[]
        def callback(caller, ntimestep, nlocal, tag, x, f):
            calls.append((caller, ntimestep, nlocal, tag.shape, x.shape, f.shape))

        with LMP(cmdargs=['-nocite', '-log','none', '-screen','none']) as lmp:
            lmp.command("boundary p p p")
            lmp.command("region cell block 0 1 0 1 0 1 units box")
            lmp.command("create_box 1 cell")
            lmp.fix_external("python", "all", 1, 1, callback, caller="me")
            lmp.command("mass 1 1.0")
            lmp.command("run 0")
            self.assertGreater(len(calls),0)
            self.assertEqual(calls[0],("me", 0, 0, (0,), (0,3), (0,3)))

if __name__ == "__main__":
    unittest.main()
