import numpy as np

float32 = np.float32
float64 = np.float64
int32 = np.int32
int64 = np.int64
