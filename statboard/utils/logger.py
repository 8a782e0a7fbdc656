import logging
import sys
from datetime import datetime
from pathlib import Path

from statboard.config import Config

def setup_logger(name: str) -> logging.Logger:
    """
    Setup a logger with consistent formatting.
    
    The console handler follows Config.LOG_LEVEL. A dated file under
    Config.LOG_DIR receives everything from DEBUG up; an empty LOG_DIR
    leaves the logger console-only.
    """
    
    logger = logging.getLogger(name)
    
    if logger.handlers:
        return logger
    
    log_level = Config.get_log_level()
    logger.setLevel(logging.DEBUG if Config.LOG_DIR else log_level)
    
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    if not Config.LOG_DIR:
        return logger
    
    log_dir = Path(Config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    
    file_handler = logging.FileHandler(
        log_dir / f'statboard_{datetime.now().strftime("%Y%m%d")}.log',
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    
    return logger
