"""Core data model: sequence types, the shared pool, slots and instruments.

WHY: Everything else in the package (codecs, compiler, CLI) works on the
same few objects. Keeping them together makes the contract between the
instrument and the pool explicit.

HOW: sequence.py defines SequenceType and Sequence, pool.py the shared
SequencePool, legacy.py the pre-v20 run converter, and instrument.py the
SlotSet and Instrument that tie them together.

RULES:
- Canonical sequence-type order never changes
- Instruments reference pool entries by index; they never own them
"""
