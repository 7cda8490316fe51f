"""Devlin — a single-CPU preemptive process scheduler simulator.

A fixed-capacity population of synthetic processes is admitted over
time.  Every simulated tick the scheduler decides which one process
occupies the CPU, while processes block on simulated devices, exhaust
their CPU budget, or get preempted so that nobody waits forever.
"""
