"""nsbridge: slipstream Laminas packages in place of deprecated Zend Framework ones."""

__version__ = "0.1.0"
