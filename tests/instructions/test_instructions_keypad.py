import unittest

from retro_chip8.core.state import Chip8State
from retro_chip8.instructions import decode_opcode, execute_instruction

class TestChip8KeypadInstructions(unittest.TestCase):
    def setUp(self):
        self.state = Chip8State()

    def _execute(self, opcode, current_pc=0x200):
        self.state.pc = current_pc
        op = decode_opcode(opcode, current_pc)
        self.state.pc += op.length
        execute_instruction(op, self.state)

    def test_skp(self):
        self.state.v[1] = 0xA
        self._execute(0xE19E)
        self.assertEqual(self.state.pc, 0x202)
        self.state.keys[0xA] = True
        self._execute(0xE19E)
        self.assertEqual(self.state.pc, 0x204)

    def test_sknp(self):
        self.state.v[1] = 0xA
        self._execute(0xE1A1)
        self.assertEqual(self.state.pc, 0x204)
        self.state.keys[0xA] = True
        self._execute(0xE1A1)
        self.assertEqual(self.state.pc, 0x202)

    def test_key_index_masked_to_keypad(self):
        self.state.v[1] = 0x1A
        self.state.keys[0xA] = True
        self._execute(0xE19E)
        self.assertEqual(self.state.pc, 0x204)

    def test_wait_key_stalls(self):
        for _ in range(3):
            self._execute(0xF30A, current_pc=0x200)
            self.assertEqual(self.state.pc, 0x200)

    def test_wait_key_stores_lowest_pressed(self):
        self.state.keys[0x7] = True
        self.state.keys[0xC] = True
        self._execute(0xF30A)
        self.assertEqual(self.state.pc, 0x202)
        self.assertEqual(self.state.v[3], 0x7)

if __name__ == '__main__':
    unittest.main()
