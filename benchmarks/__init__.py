"""Performance benchmarks for numopt.

Microbenchmarks for the finite-difference engine, whose cost grows with the
problem dimension and the chosen accuracy level.
"""
