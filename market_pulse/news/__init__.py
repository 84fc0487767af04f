"""
News job components: RSS parsing, feed fetching and contextual analysis.
"""
