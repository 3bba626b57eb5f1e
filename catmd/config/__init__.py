"""
Configuration Management
==========================

This module contains configuration management components for catmd. Saved
defaults are merged under the command-line options.
"""

from catmd.config.manager import ConfigManager
