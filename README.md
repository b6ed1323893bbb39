# proprf

Building blocks for two-party pseudorandom-function and zero-knowledge
protocols, in pure Python with no third-party dependencies.

## Modules

- `proprf.field61` does arithmetic modulo the Mersenne prime `PR = 2**61 - 1`.
  It covers `add_mod`, `mult_mod`, `mod`, `mod_pre` and `extract_fp`. It also
  handles 128-bit "blocks" that pack two 64-bit lanes: `make_block`, `high64`
  and `low64` build and split them, and `vec_partial_mod`, `vec_mod`,
  `add_mod_block` and `mult_mod_block` work on them lane by lane. For vectors
  it offers `mult_mod_batch`, `uni_hash_coeff_gen` (the powers
  `seed, seed**2, …`) and `vector_inn_prdt_sum_red` (an inner product).
- `proprf.oprf_fp` provides `OprfFp`, a 384-bit value held as three 128-bit
  limbs (`high`, `middle`, `low`). It has `from_int`, `to_int`, `bound`,
  `reduce_mod`, and addition with a single reduction (`oprf_fp_add_mod`, or
  `a + b`). `str()` prints the six 64-bit words.
- `proprf.gf128` multiplies in GF(2^128) modulo `x**128 + x**7 + x**2 + x + 1`.
  It has `clmul64`, `mul128` (which returns `(low, high)`), `reduce`, `gfmul`
  and `gfmul_batch`.
- `proprf.keccak_f` provides the Keccak-p[1600] permutation. `keccak_round`
  applies one round. `keccak_p1600(lanes, rounds)` applies the last `rounds`
  of the 24 rounds, where `rounds` runs from 0 to 24. `rol64` is also here.
- `proprf.keccak4x` provides `KeccakP1600Times4`, four Keccak states stored
  lane-interleaved. On one instance it can add, overwrite, zero, extract and
  extract-and-add bytes. On all four instances at once it can add, overwrite,
  extract and extract-and-add lanes. It also has 24- and 12-round
  permutations and the loops `fast_loop_absorb` and
  `fast_loop_absorb_12rounds`, which return the number of bytes consumed.
- `proprf.channel` defines the abstract `Channel` with `send`, `recv` and
  `flush`. `MemoryChannel` is an in-process implementation of it, and
  `make_pipe()` returns a connected pair. `recv` raises `TimeoutError` if the
  bytes do not arrive within the channel's timeout, which is 5 seconds by
  default.
- `proprf.auth_helper` provides `DoubAuthHelper`, which opens authenticated
  field values between `Party.ALICE` (the prover) and `Party.BOB` (the
  verifier). Both sides fold the MACs into a SHA-256 transcript.
  `triple_equality_check` compares the two transcripts and raises
  `CheckFailedError` on a mismatch.
- `proprf.edabits` holds the index arithmetic of an edaBit batch
  (`EdabitLayout` with `fp_index` and `f2_index`) and `plan_rounds`, which
  splits a conversion into rounds. `intfp_add` and `intfp_add_const` do share
  arithmetic. `random_point` lets the verifier pick a point and send it to
  the prover.
- `proprf.ram_trace` packs memory accesses into rows of 128-bit words
  (`pack_row`, `unpack_row`) and checks traces (`trace_is_consistent`). It
  also provides `RamTrace`, a memory that records every `read` and `write`.
  `check` verifies the recorded trace and resets it, raising `RamCheckError`
  on failure. `refresh` does the same once the step counter nears its limit.

## Installing

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Examples

```python
from proprf.field61 import PR, add_mod, mult_mod
from proprf.gf128 import gfmul
from proprf.keccak_f import keccak_p1600

assert add_mod(PR - 1, 2) == 1
x = mult_mod(123456789, 987654321)

assert gfmul(3, 5) == 15          # (x + 1)(x**2 + 1) = x**3 + x**2 + x + 1

state = keccak_p1600([0] * 25, 24)
```

Opening one authenticated value over an in-memory pipe:

```python
from proprf.auth_helper import DoubAuthHelper, Party
from proprf.channel import make_pipe
from proprf.field61 import add_mod, make_block, mult_mod

alice_end, bob_end = make_pipe()
delta, key, value = 12345, 777, 42
mac = add_mod(key, mult_mod(value, delta))

prover = DoubAuthHelper(Party.ALICE, alice_end)
verifier = DoubAuthHelper(Party.BOB, bob_end)
verifier.set_delta(0, delta)

assert prover.open_check_send([make_block(value, mac)]) == [42]
assert verifier.open_check_recv([make_block(0, key)]) == [42]
prover.triple_equality_check()
assert verifier.triple_equality_check()
```

Recording and checking a memory trace:

```python
from proprf.edabits import plan_rounds
from proprf.ram_trace import RamTrace

ram = RamTrace(index_bits=4, step_bits=16, value_bits=64)
ram.write(3, [99])
assert ram.read(3) == [99]
ram.check()

assert plan_rounds(10, 0, batch=4) == [4, 4, 2]
```

## What the package does not do

This package provides building blocks, not a complete protocol. It does not
include:

- an OPRF evaluation between a client and a server;
- oblivious transfer or VOLE generation;
- a network transport, since `MemoryChannel` only connects two ends inside one
  process;
- a command-line program.

`proprf.edabits` does not generate or convert edaBits itself. It only does
the index and share arithmetic. `proprf.ram_trace` checks traces of plain
values, with no MACs or zero-knowledge proof attached.

## Running the tests

```
pytest
```