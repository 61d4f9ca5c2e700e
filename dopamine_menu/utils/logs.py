import logging
import sys

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(level: int = logging.INFO):
    '''Configure root logger for the entire codebase.'''
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],  # logs to console
    )
    # discord.py is chatty at INFO about gateway reconnects
    logging.getLogger('discord.gateway').setLevel(max(level, logging.WARNING))
