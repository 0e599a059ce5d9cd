from typing import Any, Callable, Sequence, Tuple, Union

import numpy as np

ModelState = Tuple[float, np.ndarray]
TimeSpan = Tuple[float, float]
Parameters = Union[None, float, Sequence[float], np.ndarray, Any]

RHSFunction = Callable[..., Any]
