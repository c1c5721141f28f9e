"""Select the test files and parallel test commands a CI run should execute."""
