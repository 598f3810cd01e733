"""
Domain layer for the FizzBuzz pipeline.

This layer contains:
- Data models (classification results, classifier kinds)
- Classifier strategies and their factory
- The producer/consumer pipeline runner
"""
