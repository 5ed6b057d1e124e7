from .mock_dso import MockDSO
