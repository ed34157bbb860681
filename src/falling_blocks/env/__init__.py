"""Gymnasium environments for Falling Blocks."""

from __future__ import annotations

from gymnasium.envs.registration import register

ENV_ID = "FallingBlocks-12x20-v0"

register(
    id=ENV_ID,
    entry_point="falling_blocks.env.falling_blocks_env:FallingBlocksEnv",
)

__all__ = ["ENV_ID"]
