"""
Services catalogue - the treatments patients can book.
"""
