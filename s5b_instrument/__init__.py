"""S5B instrument persistence: sequence bindings, file codecs, chunk compiler.

WHY: A Sunsoft 5B instrument does not own its envelopes. It binds each of
five sequence types to an entry in a shared sequence pool. Those bindings
have to survive two very different file formats (the project file, which
stores bare pool indices, and the portable exchange file, which carries the
full sequence payload across several historical versions), and they have to
be compiled into the exact byte layout the sound driver expects.

HOW: Three layers, leaves first:
  core      sequence types, the shared pool, the slot set, the instrument
  formats   binary stream helpers plus the project and exchange codecs
  compiler  enable-mask bit packing and symbolic sequence references

RULES:
- The five sequence types have a fixed canonical order; never reorder them
- The pool is shared by reference; instruments only store indices into it
- Codecs read and write slot-set shaped data only; framing is the caller's job
"""

__version__ = "0.1.0"
