#!/usr/bin/env python3
"""
이벤트 로그 관리 모듈

Every reported line is appended to a durable, plain-text event log. The log
file is never read back.
"""
import os
import sys
import logging

logger = logging.getLogger(__name__)

EVENT_LOGGER_NAME = 'dns_monitor.events'
FILE_FORMAT = '%(asctime)s %(message)s'
FILE_DATEFMT = '%Y/%m/%d %H:%M:%S'


class SinkError(OSError):
    """The configured output file could not be opened."""


def ensure_log_dir(path):
    """
    로그 파일의 상위 디렉토리를 생성합니다 (없으면).

    Args:
        path (str): 로그 파일 경로
    """
    parent = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(parent, exist_ok=True)
    except OSError as e:
        logger.warning("cannot create log dir %s: %s", parent, e)


def open_file_handler(path):
    """
    로그 파일을 append 모드로 엽니다.

    Args:
        path (str): 로그 파일 경로

    Returns:
        logging.FileHandler: 타임스탬프 포맷이 적용된 핸들러

    Raises:
        SinkError: 파일을 열 수 없을 때
    """
    ensure_log_dir(path)
    try:
        handler = logging.FileHandler(path, mode='a', encoding='utf-8')
    except OSError as e:
        raise SinkError(e.errno, f"cannot open output file {path}: {e.strerror or e}") from e
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
    return handler


def default_handler(stream=None):
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter('%(message)s'))
    return handler


def open_event_log(path=None, stream=None):
    """
    이벤트 로그용 logger를 준비합니다.
    파일을 열 수 없으면 경고를 남기고 기본 출력(stderr)으로 대체합니다.

    Args:
        path (str): 로그 파일 경로 (없으면 기본 출력)
        stream: 기본 출력 스트림 (테스트용)

    Returns:
        logging.Logger: 이벤트 logger
    """
    event_logger = logging.getLogger(EVENT_LOGGER_NAME)
    close_event_log(event_logger)
    event_logger.setLevel(logging.INFO)
    event_logger.propagate = False

    handler = None
    if path:
        try:
            handler = open_file_handler(path)
        except SinkError as e:
            logger.warning("Failed to open output file %s: %s; logging to default output", path, e)
    if handler is None:
        handler = default_handler(stream)
    event_logger.addHandler(handler)
    return event_logger


def close_event_log(event_logger):
    for h in list(event_logger.handlers):
        event_logger.removeHandler(h)
        h.close()
