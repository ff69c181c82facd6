from .google_2014 import Scenario, build_google_2014

__all__ = ["Scenario", "build_google_2014"]
