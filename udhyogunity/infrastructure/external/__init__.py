"""External collaborators: media uploads (Cloudinary) and payment callbacks (Razorpay)."""
