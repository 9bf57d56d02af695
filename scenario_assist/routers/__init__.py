"""API routers for Scenario Assist."""

from scenario_assist.routers import analysis, explain, assistant, health

__all__ = ['analysis', 'explain', 'assistant', 'health']
