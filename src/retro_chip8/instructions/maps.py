# src/retro_chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from retro_chip8.core.snapshot import InstructionKind as K
from . import alu
from . import control
from . import display
from . import keypad
from . import load

# @intent:map 上位ニブルから (マスク, パターン, 命令種別) の候補リストへのマッピングテーブル。
# @intent:rationale 上位ニブルで候補を絞り込み、グループ内は下位ニブル/下位バイトで一致判定します。
DECODE_MAP = {
    0x0: (
        (0xFFFF, 0x00E0, K.CLS),
        (0xFFFF, 0x00EE, K.RET),
    ),
    0x1: ((0xF000, 0x1000, K.JP),),
    0x2: ((0xF000, 0x2000, K.CALL),),
    0x3: ((0xF000, 0x3000, K.SE_VX_KK),),
    0x4: ((0xF000, 0x4000, K.SNE_VX_KK),),
    0x5: ((0xF00F, 0x5000, K.SE_VX_VY),),
    0x6: ((0xF000, 0x6000, K.LD_VX_KK),),
    0x7: ((0xF000, 0x7000, K.ADD_VX_KK),),
    0x8: (
        (0xF00F, 0x8000, K.LD_VX_VY),
        (0xF00F, 0x8001, K.OR),
        (0xF00F, 0x8002, K.AND),
        (0xF00F, 0x8003, K.XOR),
        (0xF00F, 0x8004, K.ADD_VX_VY),
        (0xF00F, 0x8005, K.SUB),
        (0xF00F, 0x8006, K.SHR),
        (0xF00F, 0x8007, K.SUBN),
        (0xF00F, 0x800E, K.SHL),
    ),
    0x9: ((0xF00F, 0x9000, K.SNE_VX_VY),),
    0xA: ((0xF000, 0xA000, K.LD_I),),
    0xB: ((0xF000, 0xB000, K.JP_V0),),
    0xC: ((0xF000, 0xC000, K.RND),),
    0xD: ((0xF000, 0xD000, K.DRW),),
    0xE: (
        (0xF0FF, 0xE09E, K.SKP),
        (0xF0FF, 0xE0A1, K.SKNP),
    ),
    0xF: (
        (0xF0FF, 0xF007, K.LD_VX_DT),
        (0xF0FF, 0xF00A, K.LD_VX_K),
        (0xF0FF, 0xF015, K.LD_DT_VX),
        (0xF0FF, 0xF018, K.LD_ST_VX),
        (0xF0FF, 0xF01E, K.ADD_I_VX),
        (0xF0FF, 0xF029, K.LD_F_VX),
        (0xF0FF, 0xF033, K.LD_B_VX),
        (0xF0FF, 0xF055, K.LD_MEM_VX),
        (0xF0FF, 0xF065, K.LD_VX_MEM),
    ),
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Display
    K.CLS: display.execute_cls,
    K.DRW: display.execute_drw,

    # Control
    K.RET: control.execute_ret,
    K.JP: control.execute_jp,
    K.CALL: control.execute_call,
    K.SE_VX_KK: control.execute_se_vx_kk,
    K.SNE_VX_KK: control.execute_sne_vx_kk,
    K.SE_VX_VY: control.execute_se_vx_vy,
    K.SNE_VX_VY: control.execute_sne_vx_vy,
    K.JP_V0: control.execute_jp_v0,

    # ALU
    K.LD_VX_KK: alu.execute_ld_vx_kk,
    K.ADD_VX_KK: alu.execute_add_vx_kk,
    K.LD_VX_VY: alu.execute_ld_vx_vy,
    K.OR: alu.execute_or,
    K.AND: alu.execute_and,
    K.XOR: alu.execute_xor,
    K.ADD_VX_VY: alu.execute_add_vx_vy,
    K.SUB: alu.execute_sub,
    K.SHR: alu.execute_shr,
    K.SUBN: alu.execute_subn,
    K.SHL: alu.execute_shl,
    K.RND: alu.execute_rnd,

    # Load/Store
    K.LD_I: load.execute_ld_i,
    K.LD_VX_DT: load.execute_ld_vx_dt,
    K.LD_DT_VX: load.execute_ld_dt_vx,
    K.LD_ST_VX: load.execute_ld_st_vx,
    K.ADD_I_VX: load.execute_add_i_vx,
    K.LD_F_VX: load.execute_ld_f_vx,
    K.LD_B_VX: load.execute_ld_b_vx,
    K.LD_MEM_VX: load.execute_ld_mem_vx,
    K.LD_VX_MEM: load.execute_ld_vx_mem,

    # Keypad
    K.SKP: keypad.execute_skp,
    K.SKNP: keypad.execute_sknp,
    K.LD_VX_K: keypad.execute_ld_vx_k,
}
