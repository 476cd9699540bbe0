import unittest

from retro_chip8.core.errors import MemoryAccessError
from retro_chip8.core.state import Chip8State
from retro_chip8.instructions import decode_opcode, execute_instruction

class TestChip8DisplayInstructions(unittest.TestCase):
    def setUp(self):
        self.state = Chip8State()

    def _execute(self, opcode):
        op = decode_opcode(opcode, self.state.pc)
        self.state.pc += op.length
        execute_instruction(op, self.state)

    def _lit(self):
        return {
            (x, y)
            for y, row in enumerate(self.state.framebuffer.snapshot())
            for x, px in enumerate(row) if px
        }

    def test_draw_font_glyph(self):
        # glyph "0" at (0, 0): F0 90 90 90 F0
        self.state.i = 0x000
        self._execute(0xD015)
        lit = self._lit()
        self.assertIn((0, 0), lit)
        self.assertIn((3, 0), lit)
        self.assertNotIn((4, 0), lit)
        self.assertIn((0, 1), lit)
        self.assertNotIn((1, 1), lit)
        self.assertEqual(self.state.v[0xF], 0)

    def test_draw_twice_clears_and_collides(self):
        self.state.memory.load(0x300, [0xFF, 0x81])
        self.state.i = 0x300
        self.state.v[1], self.state.v[2] = 10, 5

        self._execute(0xD122)
        self.assertEqual(self.state.v[0xF], 0)
        self.assertEqual(len(self._lit()), 10)

        self._execute(0xD122)
        self.assertEqual(self.state.v[0xF], 1)
        self.assertEqual(self._lit(), set())

    def test_vf_reset_when_no_collision(self):
        self.state.v[0xF] = 1
        self.state.memory.load(0x300, [0x80])
        self.state.i = 0x300
        self._execute(0xD011)
        self.assertEqual(self.state.v[0xF], 0)

    def test_draw_wraps_both_axes(self):
        self.state.memory.load(0x300, [0xC0, 0xC0])
        self.state.i = 0x300
        self.state.v[1], self.state.v[2] = 63, 31
        self._execute(0xD122)
        self.assertEqual(self._lit(), {(63, 31), (0, 31), (63, 0), (0, 0)})

    def test_start_coordinates_wrap(self):
        self.state.memory.load(0x300, [0x80])
        self.state.i = 0x300
        self.state.v[1], self.state.v[2] = 64 + 3, 32 + 4
        self._execute(0xD121)
        self.assertEqual(self._lit(), {(3, 4)})

    def test_coordinates_read_from_vf(self):
        self.state.memory.load(0x300, [0x80])
        self.state.i = 0x300
        self.state.v[0xF] = 9
        self._execute(0xDFF1)
        self.assertEqual(self._lit(), {(9, 9)})

    def test_zero_height_sprite(self):
        self._execute(0xD120)
        self.assertEqual(self._lit(), set())
        self.assertEqual(self.state.v[0xF], 0)

    def test_sprite_read_past_end(self):
        self.state.i = 0xFFE
        with self.assertRaises(MemoryAccessError):
            self._execute(0xD125)

    def test_cls(self):
        self.state.framebuffer.xor_pixel(1, 1)
        self._execute(0x00E0)
        self.assertEqual(self._lit(), set())
        self._execute(0x00E0)
        self.assertEqual(self._lit(), set())

if __name__ == '__main__':
    unittest.main()
