"""Pro Fit Agent: 70.3 training plan engine with a coach that can edit the plan."""

__version__ = "0.1.0"
