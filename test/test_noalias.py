import operator

import numpy as np

from lazystride import AssignOps, CPUArray, NoAlias, noalias
from lazystride.utils.helper import assignstat

OPS = {"+": operator.add, "-": operator.sub, "*": operator.mul, "/": operator.truediv}
IOPS = {"+": operator.iadd, "-": operator.isub, "*": operator.imul, "/": operator.itruediv}

def check_array(myarr, nparr, rtol=1e-5):
  assert myarr.shape == nparr.shape
  assert np.allclose(myarr.numpy(), nparr, rtol=rtol)

class OperationTester:
  """Operands over every supported storage order, with numpy reference results.

  ``a`` and ``ra`` are row-major, ``ca`` is column-major, ``cta`` and ``ua`` use two
  different non-canonical dense stride orders. ``ba`` and ``pa`` broadcast against
  ``a``: ``ba`` through a size-1 axis with gapped strides, ``pa`` through rank padding.
  """
  def __init__(self, op):
    shape = (3, 2, 4)
    self.np_a = np.arange(1, 25, dtype=np.float32).reshape(shape)
    self.np_ra = np.arange(24, 0, -1, dtype=np.float32).reshape(shape)
    self.np_ca = (np.arange(1, 25, dtype=np.float32).reshape(shape) % 5) + 1
    self.np_cta = (np.arange(1, 25, dtype=np.float32).reshape(shape) % 7) + 2
    self.np_ua = (np.arange(1, 25, dtype=np.float32).reshape(shape) % 3) + 1
    self.np_ba = np.arange(2, 14, dtype=np.float32).reshape((3, 1, 4))
    self.np_pa = np.arange(3, 11, dtype=np.float32).reshape((2, 4))

    self.a = CPUArray(self.np_a, layout="C")
    self.ra = CPUArray(self.np_ra, layout="C")
    self.ca = CPUArray(self.np_ca, layout="F")
    self.cta = CPUArray.permuted(self.np_cta, (1, 2, 0))
    self.ua = CPUArray.permuted(self.np_ua, (2, 0, 1))
    self.ba = CPUArray(self.np_ba, strides=(1, 5, 6))
    self.pa = CPUArray(self.np_pa, layout="F")

    fn = OPS[op]
    self.res_rr = fn(self.np_a, self.np_ra)
    self.res_rc = fn(self.np_a, self.np_ca)
    self.res_rct = fn(self.np_a, self.np_cta)
    self.res_ru = fn(self.np_a, self.np_ua)
    self.res_rb = fn(self.np_a, self.np_ba)
    self.res_rp = fn(self.np_a, self.np_pa)

  def cases(self):
    return (("row_major", self.ra, self.res_rr), ("column_major", self.ca, self.res_rc),
            ("central_major", self.cta, self.res_rct), ("unit_major", self.ua, self.res_ru),
            ("broadcast_axis", self.ba, self.res_rb), ("broadcast_rank", self.pa, self.res_rp))

def test_layouts():
  tester = OperationTester("+")
  assert tester.a.c_contiguous and not tester.a.f_contiguous
  assert tester.ca.f_contiguous and not tester.ca.c_contiguous
  for arr in (tester.cta, tester.ua, tester.ba):
    assert not arr.c_contiguous and not arr.f_contiguous
  assert tester.cta.strides == (1, 12, 3) and tester.ua.strides == (2, 1, 6)
  for arr, nparr in ((tester.ca, tester.np_ca), (tester.cta, tester.np_cta), (tester.ua, tester.np_ua),
                     (tester.ba, tester.np_ba), (tester.pa, tester.np_pa)):
    check_array(arr, nparr)

def test_a_op_b():
  for op, fn in OPS.items():
    tester = OperationTester(op)
    for name, other, expected in tester.cases():
      b = CPUArray.zeros(tester.ca.shape)
      noalias(b)[...] = fn(tester.a, other)
      assert b.shape == expected.shape, f"row_major {op} {name}"
      assert np.allclose(b.numpy(), expected), f"row_major {op} {name}"

def test_a_op_equal_b():
  for op, fn in IOPS.items():
    tester = OperationTester(op)
    for name, other, expected in tester.cases():
      b = tester.a.evaluate()
      target = noalias(b)
      target = fn(target, other)
      assert isinstance(target, NoAlias) and target.container is b
      assert np.allclose(b.numpy(), expected), f"row_major {op}= {name}"

def test_noalias_equivalence():
  for op, fn in IOPS.items():
    tester = OperationTester(op)
    for name, other, expected in tester.cases():
      b1, b2 = tester.a.evaluate(layout="F"), tester.a.evaluate(layout="F")
      t = noalias(b1)
      t = fn(t, other * 2 - 1)
      b2 = fn(b2, other * 2 - 1)
      assert np.array_equal(b1.numpy(), b2.numpy()), f"{op}= {name}"
    b1, b2 = CPUArray.zeros((3, 2, 4)), CPUArray.zeros((3, 2, 4))
    noalias(b1).assign(OPS[op](tester.ra, tester.cta))
    b2.assign(OPS[op](tester.ra, tester.cta))
    assert np.array_equal(b1.numpy(), b2.numpy())

def test_noalias_skips_alias_check():
  assignstat.reset()
  a, b = CPUArray(np.ones((2, 2), dtype=np.float32)), CPUArray.zeros((2, 2))
  noalias(b).assign(a + 1)
  t = noalias(b)
  t += a
  t *= 2
  check_array(b, np.full((2, 2), 6, dtype=np.float32))
  assert assignstat.get("direct") == 3 and assignstat.get("temporary") == 0
  assert assignstat.get("direct", AssignOps.MUL) == 1

def test_noalias_resize():
  np_a = np.arange(6, dtype=np.float32).reshape((2, 3))
  b = CPUArray(shape=(1, 3))
  ret = noalias(b).assign(CPUArray(np_a) * 2)
  assert ret is b
  check_array(b, np_a * 2)

def test_scenario():
  np_a = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.float32)
  a = CPUArray(np_a, layout="C")
  b = CPUArray(np_a, layout="F")
  result = CPUArray.zeros((2, 3))
  noalias(result)[...] = a + b
  check_array(result, np.array([[2, 4, 6], [8, 10, 12]], dtype=np.float32))

  a += a
  check_array(a, np.array([[2, 4, 6], [8, 10, 12]], dtype=np.float32))
  check_array(b, np_a)
