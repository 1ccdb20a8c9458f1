"""jwtlite tests"""
