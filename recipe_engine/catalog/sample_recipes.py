"""Built-in sample catalog.

Raw records in the mobile app's camelCase JSON shape. They are validated
into Recipe models by catalog.default_catalog(); nothing else should read
this list directly.
"""

SAMPLE_RECIPES: list[dict] = [
    {
        "id": "carbonara",
        "title": "Spaghetti Carbonara",
        "description": "A classic Italian pasta dish with eggs, cheese, pancetta, and pepper.",
        "servings": 4,
        "prepTime": "10 min",
        "cookTime": "15 min",
        "totalTime": "25 min",
        "category": "Dinner",
        "difficulty": "Medium",
        "tags": ["pasta", "italian", "dinner"],
        "heroImage": "https://images.unsplash.com/photo-1588013273468-315080664754?q=80&w=2070&auto=format&fit=crop",
        "ingredients": ["Spaghetti", "Eggs", "Pancetta", "Pecorino Romano Cheese", "Black Pepper"],
        "steps": [
            {"instruction": "Cook spaghetti according to package directions.", "hasTimer": True, "timerDuration": 10},
            {"instruction": "While pasta cooks, fry pancetta until crispy."},
            {"instruction": "Whisk eggs, cheese, and pepper in a bowl."},
            {"instruction": "Drain pasta, reserving some pasta water. Add pasta to pancetta. Turn off heat."},
            {"instruction": "Quickly mix in egg mixture. Add pasta water if needed for creaminess. Serve immediately."},
        ],
        "nutritionInfo": {
            "calories": "600 kcal",
            "protein": "25g",
            "carbs": "70g",
            "fat": "28g",
            "sodium": "950mg",
            "fiber": "3g",
            "sugar": "2g",
        },
    },
    {
        "id": "chicken-stir-fry",
        "title": "Chicken Stir-Fry",
        "description": "A quick and healthy chicken and vegetable stir-fry.",
        "servings": 2,
        "prepTime": "15 min",
        "cookTime": "10 min",
        "totalTime": "25 min",
        "category": "Dinner",
        "difficulty": "Easy",
        "tags": ["chicken", "asian", "quick", "high-protein", "dairy-free"],
        "heroImage": "https://images.unsplash.com/photo-1604382354936-07c5d9983bd3?q=80&w=2070&auto=format&fit=crop",
        "ingredients": ["Chicken Breast", "Broccoli", "Carrots", "Bell Peppers", "Soy Sauce", "Ginger", "Garlic"],
        "steps": [
            {"instruction": "Slice chicken and vegetables."},
            {"instruction": "Stir-fry chicken until cooked. Remove from pan.", "hasTimer": True, "timerDuration": 6},
            {"instruction": "Stir-fry vegetables until tender-crisp.", "hasTimer": True, "timerDuration": 4},
            {
                "instruction": "Add chicken back to pan with soy sauce, ginger, and garlic. "
                "Cook for 1-2 minutes. Serve with rice."
            },
        ],
        "nutritionInfo": {"calories": "400 kcal", "protein": "35g", "carbs": "30g", "fat": "15g"},
    },
    {
        "id": "classic-pancakes",
        "title": "Classic Pancakes",
        "description": "Fluffy and delicious pancakes, perfect for breakfast.",
        "servings": 4,
        "prepTime": "10 min",
        "cookTime": "20 min",
        "totalTime": "30 min",
        "category": "Breakfast",
        "difficulty": "Easy",
        "tags": ["breakfast", "vegetarian", "american"],
        "heroImage": "https://images.unsplash.com/photo-1528207776546-365bb710ee93?q=80&w=2070&auto=format&fit=crop",
        "ingredients": ["All-purpose flour", "Sugar", "Baking powder", "Salt", "Milk", "Egg", "Melted butter"],
        "steps": [
            {"instruction": "In a large bowl, whisk together flour, sugar, baking powder, and salt."},
            {"instruction": "In a separate bowl, whisk together milk, egg, and melted butter."},
            {"instruction": "Pour wet ingredients into dry ingredients and mix until just combined (do not overmix)."},
            {"instruction": "Heat a lightly oiled griddle or frying pan over medium-high heat."},
            {"instruction": "Pour or scoop the batter onto the griddle, using approximately 1/4 cup for each pancake."},
            {
                "instruction": "Cook for about 2-3 minutes per side, or until golden brown and cooked through. "
                "Serve with your favorite toppings.",
                "hasTimer": True,
                "timerDuration": 5,
            },
        ],
        "nutritionInfo": {"calories": "250 kcal per 2 pancakes", "protein": "7g", "carbs": "35g", "fat": "9g"},
    },
    {
        "id": "avocado-toast",
        "title": "Avocado Toast with Egg",
        "description": "A simple and nutritious breakfast or light meal.",
        "servings": 1,
        "prepTime": "5 min",
        "cookTime": "5 min",
        "totalTime": "10 min",
        "category": "Breakfast",
        "difficulty": "Easy",
        "tags": ["breakfast", "vegetarian", "quick"],
        "heroImage": "https://images.unsplash.com/photo-1482049016688-2d3e1b311543?q=80&w=1910&auto=format&fit=crop",
        "ingredients": ["Bread slice", "Avocado", "Egg", "Salt", "Pepper", "Red pepper flakes (optional)"],
        "steps": [
            {"instruction": "Toast the bread slice to your liking."},
            {"instruction": "While the bread is toasting, mash the avocado in a small bowl. Season with salt and pepper."},
            {"instruction": "Cook an egg to your preference (fried, poached, or scrambled)."},
            {"instruction": "Spread the mashed avocado on the toast."},
            {"instruction": "Top with the cooked egg. Sprinkle with red pepper flakes if desired. Serve immediately."},
        ],
        "nutritionInfo": {"calories": "350 kcal", "protein": "15g", "carbs": "30g", "fat": "20g"},
    },
    {
        "id": "garlic-butter-chicken",
        "title": "Garlic Butter Chicken",
        "description": "Juicy chicken breast cooked in a rich garlic butter sauce. Perfect for a quick weeknight meal.",
        "servings": 2,
        "prepTime": "10 min",
        "cookTime": "20 min",
        "category": "Dinner",
        "difficulty": "Easy",
        "tags": ["chicken", "quick", "high-protein", "low-carb", "keto", "french"],
        "ingredients": [
            "2 chicken breasts",
            "3 tbsp butter",
            "4 cloves garlic, minced",
            "1 tsp dried thyme",
            "1/2 tsp salt",
            "1/4 tsp black pepper",
            "2 tbsp olive oil",
            "2 tbsp fresh parsley, chopped",
        ],
        "steps": [
            {"instruction": "Season chicken breasts with salt and pepper on both sides."},
            {"instruction": "Heat olive oil in a large skillet over medium-high heat."},
            {
                "instruction": "Cook chicken for 5-6 minutes on each side until golden brown and cooked through.",
                "hasTimer": True,
                "timerDuration": 12,
            },
            {"instruction": "Remove chicken from the skillet and set aside on a plate."},
            {"instruction": "Reduce heat to medium-low, melt butter, then add garlic and thyme until fragrant."},
            {"instruction": "Return chicken to the skillet and spoon the garlic butter sauce over it."},
            {"instruction": "Garnish with fresh parsley and serve hot."},
        ],
        "nutritionInfo": {
            "calories": "420 kcal",
            "protein": "38g",
            "carbs": "3g",
            "fat": "28g",
            "sodium": "690mg",
            "fiber": "0g",
            "sugar": "0g",
        },
    },
    {
        "id": "lemon-herb-roasted-chicken",
        "title": "Lemon Herb Roasted Chicken",
        "description": "Tender chicken thighs roasted with lemon and herbs for a flavorful, easy dinner.",
        "servings": 4,
        "prepTime": "15 min",
        "cookTime": "45 min",
        "category": "Dinner",
        "difficulty": "Medium",
        "tags": ["chicken", "roasted", "dinner", "mediterranean", "gluten-free", "dairy-free"],
        "ingredients": [
            "8 chicken thighs, bone-in, skin-on",
            "2 lemons, 1 sliced and 1 juiced",
            "4 cloves garlic, minced",
            "2 tbsp olive oil",
            "1 tbsp fresh rosemary, chopped",
            "1 tbsp fresh thyme, chopped",
            "1 tsp salt",
            "1/2 tsp black pepper",
            "1/2 cup chicken broth",
        ],
        "steps": [
            {"instruction": "Preheat oven to 400°F (200°C).", "hasTimer": True, "timerDuration": 5},
            {"instruction": "Combine olive oil, lemon juice, garlic, rosemary, thyme, salt, and pepper."},
            {"instruction": "Coat the chicken thighs with the marinade in a large baking dish."},
            {"instruction": "Arrange lemon slices among the chicken pieces and pour in the broth."},
            {
                "instruction": "Roast for 35-45 minutes, until the skin is crispy and golden.",
                "hasTimer": True,
                "timerDuration": 40,
            },
            {"instruction": "Let rest for 5 minutes before serving.", "hasTimer": True, "timerDuration": 5},
        ],
        "nutritionInfo": {
            "calories": "310 kcal",
            "protein": "28g",
            "carbs": "4g",
            "fat": "21g",
            "sodium": "720mg",
            "fiber": "1g",
            "sugar": "1g",
        },
    },
    {
        "id": "vegetable-fried-rice",
        "title": "Vegetable Fried Rice",
        "description": "A quick and easy vegetable fried rice that makes a perfect side dish or light main course.",
        "servings": 4,
        "prepTime": "15 min",
        "cookTime": "10 min",
        "category": "Lunch",
        "difficulty": "Easy",
        "tags": ["rice", "vegetarian", "quick", "stir-fry", "asian", "dairy-free"],
        "ingredients": [
            "3 cups cooked rice, preferably day-old and cold",
            "2 tbsp vegetable oil",
            "1 small onion, diced",
            "2 cloves garlic, minced",
            "1 carrot, diced small",
            "1/2 cup frozen peas",
            "2 eggs, beaten",
            "3 tbsp soy sauce",
            "1 tsp sesame oil",
            "2 green onions, sliced",
        ],
        "steps": [
            {"instruction": "Scramble the beaten eggs in a hot wok with a little oil, then set aside."},
            {"instruction": "Stir-fry onion and carrot in the remaining oil until softened.", "hasTimer": True, "timerDuration": 4},
            {"instruction": "Add garlic and stir-fry for 30 seconds until fragrant."},
            {"instruction": "Add the cold rice, breaking up clumps, and stir-fry until heated through.", "hasTimer": True, "timerDuration": 3},
            {"instruction": "Add peas, eggs, soy sauce, and sesame oil and toss to combine."},
            {"instruction": "Stir in green onions and serve hot."},
        ],
        "nutritionInfo": {
            "calories": "280 kcal",
            "protein": "8g",
            "carbs": "42g",
            "fat": "9g",
            "sodium": "820mg",
            "fiber": "3g",
            "sugar": "3g",
        },
    },
    {
        "id": "classic-beef-stew",
        "title": "Classic Beef Stew",
        "description": "A hearty beef stew with tender meat, vegetables, and rich gravy. Perfect comfort food for cold days.",
        "servings": 6,
        "prepTime": "30 min",
        "cookTime": "120 min",
        "category": "Dinner",
        "difficulty": "Medium",
        "tags": ["beef", "stew", "comfort food", "dinner", "slow-cooked", "dairy-free"],
        "ingredients": [
            "2 pounds beef chuck, cut into 1-inch cubes",
            "1/4 cup all-purpose flour",
            "1 tsp salt",
            "1/2 tsp black pepper",
            "3 tbsp vegetable oil",
            "2 onions, chopped",
            "3 cloves garlic, minced",
            "2 carrots, sliced",
            "2 potatoes, diced",
            "4 cups beef broth",
            "2 tbsp tomato paste",
            "1 tsp dried thyme",
            "1 cup frozen peas",
        ],
        "steps": [
            {"instruction": "Toss beef cubes with flour, salt, and pepper."},
            {"instruction": "Brown the beef in batches in hot oil and transfer to a plate.", "hasTimer": True, "timerDuration": 15},
            {"instruction": "Soften onions in the same pot, then add garlic.", "hasTimer": True, "timerDuration": 6},
            {"instruction": "Return beef and add carrots, potatoes, broth, tomato paste, and thyme."},
            {"instruction": "Bring to a boil, then cover and simmer until the meat is tender.", "hasTimer": True, "timerDuration": 90},
            {"instruction": "Stir in peas, cook 5 more minutes, adjust seasoning and serve.", "hasTimer": True, "timerDuration": 5},
        ],
        "nutritionInfo": {
            "calories": "420 kcal",
            "protein": "35g",
            "carbs": "25g",
            "fat": "20g",
            "sodium": "1100mg",
            "fiber": "6g",
            "sugar": "6g",
        },
    },
    {
        "id": "creamy-garlic-pasta",
        "title": "Creamy Garlic Pasta",
        "description": "A simple yet delicious creamy garlic pasta that comes together in minutes.",
        "servings": 4,
        "prepTime": "5 min",
        "cookTime": "15 min",
        "category": "Dinner",
        "difficulty": "Easy",
        "tags": ["pasta", "vegetarian", "quick", "dinner", "italian"],
        "ingredients": [
            "8 oz (250g) fettuccine or spaghetti",
            "2 tbsp butter",
            "4 cloves garlic, minced",
            "1 cup heavy cream",
            "1/2 cup grated Parmesan cheese",
            "Salt and black pepper to taste",
            "Fresh parsley, chopped for garnish",
            "Red pepper flakes (optional)",
        ],
        "steps": [
            {"instruction": "Cook pasta until al dente, reserving 1/2 cup of pasta water.", "hasTimer": True, "timerDuration": 10},
            {"instruction": "Melt butter in a large skillet and cook the garlic until fragrant."},
            {"instruction": "Pour in heavy cream and simmer until it starts to thicken.", "hasTimer": True, "timerDuration": 4},
            {"instruction": "Stir in Parmesan until melted and smooth."},
            {"instruction": "Toss the pasta in the sauce, loosening with pasta water as needed."},
            {"instruction": "Season with salt and black pepper and serve garnished with parsley."},
        ],
        "nutritionInfo": {"calories": "450 kcal", "protein": "12g", "carbs": "40g", "fat": "28g"},
    },
]
