"""
Test suite for the hhsim Hodgkin-Huxley implementation.

Run tests with:
    pytest test/
    pytest test/ -v
    pytest test/ -k "physiological"
    pytest test/ --cov=hhsim --cov-report=html
"""
