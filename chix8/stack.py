"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chix8.constants import ADDRESS_MASK, STACK_SIZE
from chix8.errors import StackOverflowError, StackUnderflowError
from chix8.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowError(f"Stack overflow: call depth exceeds {STACK_SIZE}")
    masked_address = address & ADDRESS_MASK
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack, clearing the vacated slot."""
    if stack.pointer <= 0:
        raise StackUnderflowError("Stack underflow: return with empty call stack")
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
