"""Tests for control flow instructions."""

import pytest
from chix8 import execute, InvalidKeyError, UnknownInstructionError


class TestProgramCounter:
    """Test the pre-increment of the program counter."""

    def test_pc_advances_before_effect(self, fresh_state):
        state = execute(fresh_state, 0x6000)
        assert state.pc == 0x202

    def test_pc_advances_per_instruction(self, fresh_state):
        state = fresh_state
        for _ in range(3):
            state = execute(state, 0xA123)
        assert state.pc == 0x206


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30, ignored
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XKK - No skip leaves PC one instruction ahead."""
        state = fresh_state.replace(V=fresh_state.V.at[4].set(0x54))
        state = execute(state, 0x3455)
        assert state.pc == 0x202

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XKK - Skip adds one more instruction."""
        state = fresh_state.replace(V=fresh_state.V.at[4].set(0x55))
        state = execute(state, 0x3455)
        assert state.pc == 0x204

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XKK - Should skip when VX != KK."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 4

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XKK - Should not skip when VX == KK."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x55))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 4

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x44))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xAA))
        state = state.replace(V=state.V.at[8].set(0xBB))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 4

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xCC))
        state = state.replace(V=state.V.at[8].set(0xCC))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        initial_pc = state.pc

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == initial_pc + 4

    @pytest.mark.parametrize("instruction", [0x5121, 0x512F, 0x9121, 0x912E])
    def test_register_skip_with_nonzero_low_nibble_is_fatal(self, fresh_state, instruction):
        with pytest.raises(UnknownInstructionError):
            execute(fresh_state, instruction)


class TestKeySkips:
    """Test EX9E / EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip if key pressed."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 4

    def test_no_skip_if_key_released(self, fresh_state):
        state = execute(fresh_state, 0x6005)
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip if key not pressed."""
        state = execute(fresh_state, 0x6005)
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 4

    def test_no_skip_if_key_not_pressed_but_held(self, fresh_state):
        state = execute(fresh_state, 0x600F)
        state = state.replace(keypad=state.keypad.at[0xF].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2

    @pytest.mark.parametrize("instruction", [0xE09E, 0xE0A1])
    def test_key_index_out_of_range(self, fresh_state, instruction):
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        with pytest.raises(InvalidKeyError) as excinfo:
            execute(state, instruction)
        assert excinfo.value.instruction == instruction
        assert excinfo.value.pc == 0x202

    def test_unknown_e_instruction(self, fresh_state):
        with pytest.raises(UnknownInstructionError, match="E0A2"):
            execute(fresh_state, 0xE0A2)
