"""Type aliases to improve type hint readability."""

from typing import Callable, Mapping, Sequence, TypeAlias

from jax import Array
from jax.typing import ArrayLike

Context: TypeAlias = Sequence[Mapping[str, float]]
DerivativeFunction: TypeAlias = Callable[[ArrayLike, Array, Context], ArrayLike]
DerivativeSystem: TypeAlias = Sequence[DerivativeFunction]
