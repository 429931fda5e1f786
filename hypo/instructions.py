"""Instruction decoding and execution for the Hypothetical Machine.

A memory word encodes ``opcode * 1000 + target``. Only the 17 opcodes in
:class:`Op` are valid, and only targets inside memory are usable.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Optional
from .arith import bounds_cap, in_bounds, trunc_divmod
from .cpu import CPU, CPUState
from .iohooks import IOHooks
from .memory import Memory


class Op(Enum):
    """Operation tags, valued by their opcode. UNK marks an invalid word."""
    UNK = -1
    HLT = 0   # stop
    JEQ = 1   # jump if AC == 0
    JGT = 2   # jump if AC > 0
    JLT = 3   # jump if AC < 0
    JMP = 5   # jump
    JLE = 6   # jump if AC <= 0
    JNE = 7   # jump if AC != 0
    LAC = 10  # AC := MEM[a]
    PAC = 11  # MEM[a] := AC
    LMQ = 12  # MQ := MEM[a]
    PMQ = 13  # MEM[a] := MQ
    ADD = 20  # AC := AC + MEM[a]
    SUB = 21  # AC := AC - MEM[a]
    MUL = 22  # MQ := MQ * MEM[a]
    DIV = 23  # AC := MQ mod MEM[a], MQ := MQ div MEM[a]
    GET = 30  # MEM[a] := input
    PUT = 31  # output MEM[a]


@dataclass(frozen=True)
class Instruction:
    """Decoded view of a memory word."""
    op: Op
    addr: int

    def __str__(self) -> str:
        return f"{self.op.name} {self.addr:03d}"


def lookup_opcode(opcode: int) -> Optional[Op]:
    """Return the operation for opcode, or None if it isn't assigned."""
    if opcode < 0:
        return None
    try:
        return Op(opcode)
    except ValueError:
        return None


def decode(word: int) -> tuple[Instruction, CPUState]:
    """Decode a raw word into an instruction and a validity verdict."""
    opcode, target = trunc_divmod(word, 1000)
    op = lookup_opcode(opcode)
    if op is None:
        return Instruction(Op.UNK, target), CPUState.BAD_INSTRUCTION
    if not in_bounds(target):
        return Instruction(op, target), CPUState.BAD_ADDRESS
    return Instruction(op, target), CPUState.RUNNABLE


def fetch(mem: Memory, addr: int) -> tuple[Instruction, CPUState]:
    """Decode the word stored at addr.

    An address outside memory yields ``UNK 000`` and BAD_INSTRUCTION.
    """
    if not in_bounds(addr):
        return Instruction(Op.UNK, 0), CPUState.BAD_INSTRUCTION
    return decode(mem.read(addr))


# Instruction executor type; returns the new PC for a taken jump
InstructionExecutor = Callable[[Instruction, CPU, Memory, IOHooks], Optional[int]]


def execute_hlt(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """HLT: halt execution"""
    cpu.state = CPUState.HALTED
    return None


def execute_jeq(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """JEQ a: if AC == 0, PC := a"""
    return instr.addr if cpu.ac == 0 else None


def execute_jgt(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """JGT a: if AC > 0, PC := a"""
    return instr.addr if cpu.ac > 0 else None


def execute_jlt(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """JLT a: if AC < 0, PC := a"""
    return instr.addr if cpu.ac < 0 else None


def execute_jmp(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """JMP a: PC := a"""
    return instr.addr


def execute_jle(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """JLE a: if AC <= 0, PC := a"""
    return instr.addr if cpu.ac <= 0 else None


def execute_jne(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """JNE a: if AC != 0, PC := a"""
    return instr.addr if cpu.ac != 0 else None


def execute_lac(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """LAC a: AC := MEM[a]"""
    cpu.ac = mem.read(instr.addr)
    return None


def execute_pac(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """PAC a: MEM[a] := AC"""
    mem.write(instr.addr, cpu.ac)
    return None


def execute_lmq(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """LMQ a: MQ := MEM[a]"""
    cpu.mq = mem.read(instr.addr)
    return None


def execute_pmq(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """PMQ a: MEM[a] := MQ"""
    mem.write(instr.addr, cpu.mq)
    return None


def execute_add(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """ADD a: AC := AC + MEM[a]"""
    cpu.set_ac(cpu.ac + mem.read(instr.addr))
    return None


def execute_sub(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """SUB a: AC := AC - MEM[a]"""
    cpu.set_ac(cpu.ac - mem.read(instr.addr))
    return None


def execute_mul(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """MUL a: MQ := MQ * MEM[a]"""
    cpu.set_mq(cpu.mq * mem.read(instr.addr))
    return None


def execute_div(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """DIV a: AC := MQ mod MEM[a], MQ := MQ div MEM[a]

    A zero divisor leaves AC and MQ untouched.
    """
    divisor = mem.read(instr.addr)
    if divisor == 0:
        cpu.state = CPUState.DIVIDE_BY_ZERO
        return None
    quotient, remainder = trunc_divmod(cpu.mq, divisor)
    cpu.ac = remainder
    cpu.mq = quotient
    return None


def execute_get(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """GET a: MEM[a] := input"""
    mem.write(instr.addr, bounds_cap(io.read()))
    return None


def execute_put(instr: Instruction, cpu: CPU, mem: Memory, io: IOHooks) -> Optional[int]:
    """PUT a: output MEM[a]"""
    io.write(mem.read(instr.addr))
    return None


# Instruction dispatch table
INSTRUCTION_EXECUTORS: "MappingProxyType[Op, InstructionExecutor]" = MappingProxyType({
    Op.HLT: execute_hlt,
    Op.JEQ: execute_jeq,
    Op.JGT: execute_jgt,
    Op.JLT: execute_jlt,
    Op.JMP: execute_jmp,
    Op.JLE: execute_jle,
    Op.JNE: execute_jne,
    Op.LAC: execute_lac,
    Op.PAC: execute_pac,
    Op.LMQ: execute_lmq,
    Op.PMQ: execute_pmq,
    Op.ADD: execute_add,
    Op.SUB: execute_sub,
    Op.MUL: execute_mul,
    Op.DIV: execute_div,
    Op.GET: execute_get,
    Op.PUT: execute_put,
})


def execute_instruction(
    instr: Instruction,
    cpu: CPU,
    mem: Memory,
    io: IOHooks,
) -> Optional[int]:
    """Execute a single decoded instruction.

    An operation without an executor puts the CPU in BAD_INSTRUCTION.

    Returns:
        New PC value if a jump was taken, None otherwise
    """
    executor = INSTRUCTION_EXECUTORS.get(instr.op)
    if executor is None:
        cpu.state = CPUState.BAD_INSTRUCTION
        return None
    return executor(instr, cpu, mem, io)
