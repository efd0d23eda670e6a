"""Split/merge core of lockblock; depends only on the KeyService interface."""
