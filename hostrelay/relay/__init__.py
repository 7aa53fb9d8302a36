from .relay_loop import (
    close_writer as close_writer,
    pipe as pipe,
    relay as relay,
    DEFAULT_BUFFER_SIZE,
)
