"""
Supporting services for the FizzBuzz pipeline.

This package contains the bounded queue between producer and consumer and
the loopback divide service used by the remote classifier.
"""

__all__ = ['bounded_queue', 'divide_server']
