"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chix8 import execute, InvalidDigitError, MemoryBoundsError, UnknownInstructionError


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value,digits", [(197, [1, 9, 7]), (156, [1, 5, 6]), (0, [0, 0, 0]), (255, [2, 5, 5]), (7, [0, 0, 7])])
    def test_misc_bcd_conversion(self, fresh_state, value, digits):
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)

        assert [int(state.memory[0x300 + i]) for i in range(3)] == digits
        assert state.I == 0x300

    def test_bcd_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0xAFFE)
        with pytest.raises(MemoryBoundsError):
            execute(state, 0xF033)


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """Test font addressing for all hex digits."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            assert state.I == digit * 5, f"Font address wrong for digit {digit:X}"

    def test_font_digit_out_of_range(self, fresh_state):
        state = execute(fresh_state, 0x6310)  # V3 = 0x10
        with pytest.raises(InvalidDigitError) as excinfo:
            execute(state, 0xF329)
        assert excinfo.value.instruction == 0xF329


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load_canonical_mode(self, canonical_state):
        """I is unchanged with legacy mode off."""
        state = canonical_state

        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0x6304)  # V3 = 4, not stored
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xF255)  # Store V0-V2
        assert state.I == 0x300
        assert [int(state.memory[0x300 + i]) for i in range(4)] == [1, 2, 3, 0]

        state = execute(state, 0x6000)
        state = execute(state, 0x6100)
        state = execute(state, 0x6200)

        state = execute(state, 0xF265)  # Load V0-V2
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.V[2] == 3
        assert state.I == 0x300

    def test_store_load_legacy_mode(self, legacy_state):
        """I advances by X+1 in legacy mode."""
        state = legacy_state

        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0xA400)  # I = 0x400

        state = execute(state, 0xF155)  # Store V0-V1
        assert state.I == 0x400 + 2

        state = execute(state, 0xA400)
        state = execute(state, 0x6000)
        state = execute(state, 0x6100)

        state = execute(state, 0xF165)  # Load V0-V1
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.I == 0x400 + 2

    def test_load_leaves_higher_registers(self, fresh_state):
        state = execute(fresh_state, 0x6577)  # V5 = 0x77
        state = execute(state, 0xA000)  # I = font glyph 0
        state = execute(state, 0xF065)  # V0 = 0xF0

        assert state.V[0] == 0xF0
        assert state.V[5] == 0x77

    def test_store_all_registers(self, fresh_state):
        state = fresh_state
        for register in range(16):
            state = execute(state, 0x6000 | (register << 8) | register)
        state = execute(state, 0xA800)
        state = execute(state, 0xFF55)

        assert [int(state.memory[0x800 + i]) for i in range(16)] == list(range(16))

    def test_store_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0xAFFC)
        with pytest.raises(MemoryBoundsError):
            execute(state, 0xF455)


class TestWaitForKey:
    """Test FX0A at the instruction level."""

    def test_wait_for_key_blocking(self, fresh_state):
        """With no key down the instruction rewinds onto itself."""
        state = fresh_state
        initial_pc = state.pc

        state = execute(state, 0xF00A)

        assert state.pc == initial_pc
        assert state.V[0] == 0

    def test_wait_for_key_pressed(self, fresh_state):
        state = fresh_state.replace(keypad=fresh_state.keypad.at[7].set(True))
        initial_pc = state.pc

        state = execute(state, 0xF30A)

        assert state.V[3] == 7
        assert state.pc == initial_pc + 2

    def test_wait_for_key_lowest_wins(self, fresh_state):
        keypad = fresh_state.keypad.at[0xC].set(True).at[0x4].set(True)
        state = execute(fresh_state.replace(keypad=keypad), 0xF10A)
        assert state.V[1] == 0x4


class TestMiscInstructionDispatch:
    """Test misc instruction dispatch logic."""

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_past_12_bits(self, fresh_state):
        """FX1E - I is a 16-bit register, no 12-bit wrap and no flag."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xAF80)  # I = 0xF80
        state = execute(state, 0xF01E)

        assert state.I == 0x107F
        assert state.V[15] == 0

    def test_add_to_index_wraps_at_16_bits(self, fresh_state):
        from chix8.constants import ADDRESS_MASK
        import jax.numpy as jnp

        state = fresh_state.replace(I=jnp.astype(ADDRESS_MASK, jnp.uint16))
        state = execute(state, 0x6002)
        state = execute(state, 0xF01E)

        assert state.I == 0x0001

    def test_unknown_misc_instruction(self, fresh_state):
        with pytest.raises(UnknownInstructionError, match="F0FF"):
            execute(fresh_state, 0xF0FF)
