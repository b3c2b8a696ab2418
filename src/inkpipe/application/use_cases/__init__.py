"""Use cases."""

from inkpipe.application.use_cases.agent_engine import AgentEngine

__all__ = ["AgentEngine"]
