from collections import defaultdict

def genname(prefix, *args):
  return f"{prefix}_" + "_".join(str(id(obj))[-4:] for obj in args)

class AssignStat:
  def __init__(self):
    self.reset()
  def reset(self):
    self._counter = defaultdict(lambda : defaultdict(int))
  def log(self, operator, strategy, mode):
    self._counter[operator][strategy] += 1
    self._counter[operator][mode] += 1
    self._counter["all"][strategy] += 1
    self._counter["all"][mode] += 1
  def get(self, key, operator="all"):
    return self._counter[operator][key]
  def total(self):
    return sum(v["direct"] + v["temporary"] for k, v in self._counter.items() if k != "all")
  @property
  def info(self):
    info = {}
    for k, v in self._counter.items():
      info[k] = dict(v)
    return info

assignstat = AssignStat()
