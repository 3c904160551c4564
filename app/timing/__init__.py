"""EvenKeel timing package.

Provides the constant-latency machinery wrapped around every validation:

  - timer.py   — time_call() / FunctionTimer: monotonic duration of one call
  - delay.py   — DelayCalculator: padding needed to reach a target duration
  - latency.py — ConstantLatencyWrapper: timer + calculator + relative sleep
"""
