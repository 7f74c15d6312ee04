# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
fragtrain training session package.

The training loop itself is not part of this package. It is handed in by the
caller as a plain callable, loop(initial_state) -> (command, final_state).

Subsystems:
  - session: validate the starting state, run the loop, act on its result
  - termination: the closed set of quit commands and what each one does
"""
